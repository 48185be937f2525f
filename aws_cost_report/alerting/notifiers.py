"""
GitHub issue publishing.
"""

from typing import List, Optional
import logging

from github import Auth, Github

from ..config import DEFAULT_LABELS, Settings

logger = logging.getLogger(__name__)


class GitHubIssuePublisher:
    """Creates one issue per call; re-running the same day creates another."""

    def __init__(self, token: str, owner: str, repo: str, client: Optional[Github] = None):
        self.owner = owner
        self.repo = repo
        self._client = client or Github(auth=Auth.Token(token))

    @classmethod
    def from_settings(cls, settings: Settings) -> "GitHubIssuePublisher":
        settings.validate(require_github=True)
        return cls(settings.github_token, settings.github_owner, settings.github_repo)

    @property
    def repo_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    def publish(self, title: str, body: str, labels: Optional[List[str]] = None) -> int:
        """Create the issue and return its number."""
        repo = self._client.get_repo(self.repo_name)
        issue = repo.create_issue(
            title=title,
            body=body,
            labels=list(labels if labels is not None else DEFAULT_LABELS),
        )

        logger.info(f"Created GitHub issue #{issue.number} in {self.repo_name}")
        return issue.number
