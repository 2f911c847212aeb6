"""GitHub repository URL parsing."""

import re
import urllib.parse
from dataclasses import dataclass

from codehealth.exceptions import InvalidUrlError

GITHUB_HOSTS = {"github.com", "www.github.com"}
SEGMENT_PATTERN = re.compile(r"^[A-Za-z0-9_.\-]+$")


@dataclass(frozen=True)
class RepoReference:
    """Normalized owner/repo pair."""

    owner: str
    repo: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    @property
    def html_url(self) -> str:
        return f"https://github.com/{self.owner}/{self.repo}"


def parse_github_url(url: str) -> RepoReference:
    """Parse a GitHub URL into a RepoReference.

    Supported formats:
        https://github.com/owner/repo
        https://github.com/owner/repo.git
        https://github.com/owner/repo/tree/branch
        github.com/owner/repo

    Raises:
        InvalidUrlError: If the string is not a GitHub repository URL.
    """
    cleaned = (url or "").strip()
    if not cleaned:
        raise InvalidUrlError("Invalid GitHub URL format: empty URL")

    if "://" not in cleaned:
        cleaned = f"https://{cleaned}"

    parsed = urllib.parse.urlparse(cleaned)
    if parsed.scheme not in {"http", "https"}:
        raise InvalidUrlError(f"Invalid GitHub URL format: {url}")
    if (parsed.hostname or "").lower() not in GITHUB_HOSTS:
        raise InvalidUrlError(f"Invalid GitHub URL format: {url}")

    segments = [part for part in parsed.path.split("/") if part]
    if len(segments) < 2:
        raise InvalidUrlError(f"Invalid GitHub URL format: {url}")

    owner, repo = segments[0], segments[1]
    if repo.endswith(".git"):
        repo = repo[: -len(".git")]

    for part in (owner, repo):
        if not part or part in {".", ".."} or not SEGMENT_PATTERN.match(part):
            raise InvalidUrlError(f"Invalid GitHub URL format: {url}")

    return RepoReference(owner=owner, repo=repo)
