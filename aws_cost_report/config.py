"""
Settings loading and validation.
"""

import os
import pathlib
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import yaml

from .alerting.thresholds import NotableChangeThresholds

logger = logging.getLogger(__name__)

DEFAULT_REGION = "us-east-1"
DEFAULT_LABELS = ["cost", "monitoring", "daily-report"]


class ConfigurationError(Exception):
    """Required settings are missing."""

    def __init__(self, missing: List[str]):
        self.missing = list(missing)
        super().__init__(f"Missing required configuration: {', '.join(self.missing)}")


@dataclass
class Settings:
    github_token: Optional[str] = None
    github_owner: Optional[str] = None
    github_repo: Optional[str] = None
    aws_profile: Optional[str] = None
    aws_region: str = DEFAULT_REGION
    labels: List[str] = field(default_factory=lambda: list(DEFAULT_LABELS))
    thresholds: NotableChangeThresholds = field(default_factory=NotableChangeThresholds)

    def missing_keys(self, require_github: bool = True) -> List[str]:
        missing = []
        if require_github:
            if not self.github_token:
                missing.append("GITHUB_TOKEN")
            if not self.github_owner:
                missing.append("GITHUB_OWNER")
            if not self.github_repo:
                missing.append("GITHUB_REPO")
        return missing

    def validate(self, require_github: bool = True) -> "Settings":
        """Raise ConfigurationError naming every missing key."""
        missing = self.missing_keys(require_github)
        if missing:
            raise ConfigurationError(missing)
        return self

    def masked(self) -> Dict[str, Any]:
        """Effective settings without secrets."""
        return {
            "github": {
                "token": "****" if self.github_token else None,
                "owner": self.github_owner,
                "repo": self.github_repo,
            },
            "aws": {
                "profile": self.aws_profile,
                "region": self.aws_region,
            },
            "report": {
                "labels": list(self.labels),
            },
            "thresholds": {
                "notable_change_pct": self.thresholds.change_pct,
                "notable_min_amount_usd": self.thresholds.min_amount_usd,
            },
        }


def load_config(path: str) -> Dict[str, Any]:
    """Load YAML configuration file."""
    config_path = pathlib.Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    with open(config_path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _env(name: str) -> Optional[str]:
    v = os.environ.get(name)
    return v.strip() if v and v.strip() else None


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    value = data.get(name)
    return value if isinstance(value, dict) else {}


def load_settings(path: Optional[str] = None) -> Settings:
    """Merge defaults, the optional YAML file and the environment."""
    data = load_config(path) if path else {}

    github = _section(data, "github")
    aws = _section(data, "aws")
    report = _section(data, "report")

    labels = report.get("labels") or DEFAULT_LABELS
    if not isinstance(labels, list):
        labels = [labels]

    settings = Settings(
        github_token=_env("GITHUB_TOKEN"),
        github_owner=_env("GITHUB_OWNER") or github.get("owner"),
        github_repo=_env("GITHUB_REPO") or github.get("repo"),
        aws_profile=_env("AWS_PROFILE") or aws.get("profile"),
        aws_region=_env("AWS_REGION") or aws.get("region") or DEFAULT_REGION,
        labels=[str(label) for label in labels],
        thresholds=NotableChangeThresholds.from_dict(_section(data, "thresholds")),
    )

    if path:
        logger.info(f"Loaded settings from {path}")
    return settings
