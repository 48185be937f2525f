"""
Notable day-over-day change detection.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List
import logging

from ..report.models import ServiceCost

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotableChangeThresholds:
    change_pct: float = 10.0
    min_amount_usd: float = 0.01

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "NotableChangeThresholds":
        """Read the `thresholds` section of the settings file."""
        defaults = cls()
        if not isinstance(raw, dict):
            return defaults
        change_pct = raw.get("notable_change_pct")
        min_amount_usd = raw.get("notable_min_amount_usd")
        # Blank YAML keys load as None
        return cls(
            change_pct=defaults.change_pct if change_pct is None else float(change_pct),
            min_amount_usd=defaults.min_amount_usd if min_amount_usd is None else float(min_amount_usd),
        )


def is_notable(cost: ServiceCost, thresholds: NotableChangeThresholds) -> bool:
    # Both conditions are required; tiny services swing wildly in percent.
    return (
        abs(cost.change_percentage) > thresholds.change_pct
        and cost.amount > thresholds.min_amount_usd
    )


def find_notable_changes(
    services: Iterable[ServiceCost],
    thresholds: NotableChangeThresholds = NotableChangeThresholds(),
) -> List[ServiceCost]:
    """Services whose change exceeds the thresholds, in report order."""
    notable = [cost for cost in services if is_notable(cost, thresholds)]
    logger.info(f"Notable change evaluation complete: {len(notable)} services")
    return notable


def format_change_percentage(percentage: float) -> str:
    """Render a change with an explicit sign, e.g. +2.3% or -4.0%."""
    return f"{percentage:+.1f}%"
