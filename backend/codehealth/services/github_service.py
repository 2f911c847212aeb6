"""GitHub REST API client for repository analysis."""

import asyncio
import logging
import posixpath
import urllib.parse
from datetime import datetime, timezone
from typing import Any, AsyncIterator

import httpx

from codehealth.analyzers import RepoInfo, SourceFile
from codehealth.config import Settings
from codehealth.exceptions import FetchError, RateLimitError, RepoNotFoundError
from codehealth.services.repo_url import RepoReference

logger = logging.getLogger(__name__)


class GitHubService:
    """Fetches repository metadata and file contents from the GitHub API.

    The HTTP client is injected so callers control its lifetime, timeouts and
    transport. Requests are anonymous unless a token is given.
    """

    GITHUB_API_BASE = "https://api.github.com"

    # Files whose content the rules read, fetched before any other file
    KEY_FILES = (
        "package.json",
        "tsconfig.json",
        ".gitignore",
        "pyproject.toml",
        "requirements.txt",
        "requirements-dev.txt",
        "setup.cfg",
        "Pipfile",
        "README.md",
        "readme.md",
    )

    SKIP_DIRS = {
        ".git", "__pycache__", ".venv", "venv", "node_modules",
        "vendor", "dist", "build", ".next", ".nuxt", "coverage",
        ".pytest_cache", ".mypy_cache", "eggs", ".eggs", "bower_components",
    }

    BINARY_EXTENSIONS = {
        ".png", ".jpg", ".jpeg", ".gif", ".svg", ".ico", ".bmp", ".webp",
        ".pdf", ".doc", ".docx", ".xls", ".xlsx", ".ppt", ".pptx",
        ".zip", ".tar", ".gz", ".bz2", ".7z", ".rar", ".jar",
        ".mp3", ".mp4", ".avi", ".mov", ".wmv", ".flv",
        ".exe", ".dll", ".so", ".dylib", ".bin",
        ".woff", ".woff2", ".ttf", ".eot", ".otf",
        ".db", ".sqlite", ".sqlite3", ".pyc",
    }

    SKIP_SUFFIXES = (".min.js", ".bundle.js", ".map")

    CONTENT_EXTENSIONS = {
        ".py", ".js", ".jsx", ".ts", ".tsx", ".mjs", ".cjs", ".json", ".toml",
        ".yaml", ".yml", ".cfg", ".ini", ".env", ".sh", ".rb", ".go", ".java",
        ".php", ".rs", ".cs",
    }

    def __init__(
        self,
        client: httpx.AsyncClient,
        token: str | None = None,
        api_base: str = GITHUB_API_BASE,
        max_files: int = 5000,
        max_file_size: int = 100_000,
        max_content_files: int = 60,
        fetch_concurrency: int = 8,
    ):
        self.client = client
        self.token = token
        self.api_base = api_base.rstrip("/")
        self.max_files = max_files
        self.max_file_size = max_file_size
        self.max_content_files = max_content_files
        self.fetch_concurrency = max(1, fetch_concurrency)

    @classmethod
    def from_settings(cls, client: httpx.AsyncClient, settings: Settings) -> "GitHubService":
        return cls(
            client,
            token=settings.github_token,
            api_base=settings.github_api_url,
            max_files=settings.analysis_max_files,
            max_file_size=settings.analysis_max_file_size,
            max_content_files=settings.analysis_max_content_files,
            fetch_concurrency=settings.analysis_fetch_concurrency,
        )

    # =========================================================================
    # HTTP helpers
    # =========================================================================

    def _headers(self, accept: str = "application/vnd.github+json") -> dict[str, str]:
        headers = {"Accept": accept, "X-GitHub-Api-Version": "2022-11-28"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def _get(
        self,
        path: str,
        accept: str = "application/vnd.github+json",
        params: dict[str, Any] | None = None,
    ) -> httpx.Response:
        url = f"{self.api_base}/{path.lstrip('/')}"
        try:
            return await self.client.get(url, headers=self._headers(accept), params=params)
        except httpx.HTTPError as exc:
            raise FetchError(f"GitHub request failed: {exc.__class__.__name__}: {exc}") from exc

    @staticmethod
    def _rate_limit_reset(response: httpx.Response) -> datetime | None:
        reset = response.headers.get("X-RateLimit-Reset")
        if not reset or not reset.isdigit():
            return None
        return datetime.fromtimestamp(int(reset), tz=timezone.utc)

    def _is_rate_limited(self, response: httpx.Response) -> bool:
        if response.status_code == 429:
            return True
        if response.status_code != 403:
            return False
        if response.headers.get("X-RateLimit-Remaining") == "0":
            return True
        return "rate limit" in response.text.lower()

    def _raise_for_status(self, response: httpx.Response, not_found: Exception) -> None:
        if response.is_success:
            return
        if self._is_rate_limited(response):
            reset_at = self._rate_limit_reset(response)
            message = "GitHub API rate limit exceeded"
            if reset_at:
                message += f"; resets at {reset_at.isoformat()}"
            raise RateLimitError(message, reset_at=reset_at)
        if response.status_code == 404:
            raise not_found
        raise FetchError(f"GitHub API error: {response.status_code}")

    # =========================================================================
    # Repository metadata
    # =========================================================================

    async def fetch_repo_info(self, ref: RepoReference) -> RepoInfo:
        """Get repository metadata.

        Raises:
            RepoNotFoundError: Repository does not exist or is private.
            RateLimitError: Rate limit exhausted.
            FetchError: Network failure or unexpected status.
        """
        response = await self._get(f"/repos/{ref.owner}/{ref.repo}")
        self._raise_for_status(
            response, RepoNotFoundError(f"Repository not found: {ref.full_name}")
        )
        data = response.json()
        return RepoInfo(
            owner=ref.owner,
            repo=ref.repo,
            default_branch=data.get("default_branch") or "main",
            description=data.get("description"),
            language=data.get("language"),
            size=data.get("size") or 0,
            stars=data.get("stargazers_count") or 0,
            forks=data.get("forks_count") or 0,
            open_issues=data.get("open_issues_count") or 0,
            created_at=data.get("created_at"),
            updated_at=data.get("updated_at"),
            topics=tuple(data.get("topics") or ()),
        )

    async def fetch_tree(self, ref: RepoReference, branch: str) -> list[dict[str, Any]]:
        """Get the recursive file tree (blobs only) for a branch."""
        response = await self._get(
            f"/repos/{ref.owner}/{ref.repo}/git/trees/{branch}",
            params={"recursive": "1"},
        )
        # An empty repository has no tree
        if response.status_code == 409:
            logger.info("Repository %s is empty", ref.full_name)
            return []
        self._raise_for_status(
            response, RepoNotFoundError(f"Branch {branch} not found in {ref.full_name}")
        )
        data = response.json()
        if data.get("truncated"):
            logger.warning("Repository tree for %s was truncated due to size", ref.full_name)
        return [
            {"path": entry["path"], "size": entry.get("size")}
            for entry in data.get("tree") or []
            if entry.get("type") == "blob"
        ]

    async def fetch_file_content(self, ref: RepoReference, path: str, branch: str) -> str:
        """Get raw file content via the contents API."""
        response = await self._get(
            f"/repos/{ref.owner}/{ref.repo}/contents/{urllib.parse.quote(path)}",
            accept="application/vnd.github.raw",
            params={"ref": branch},
        )
        self._raise_for_status(response, FetchError(f"Failed to fetch file: {path}"))
        return response.text

    # =========================================================================
    # File enumeration
    # =========================================================================

    def should_skip_path(self, path: str) -> str | None:
        """Return the reason a tree entry is excluded from the scan, if any."""
        parts = path.split("/")
        if any(part in self.SKIP_DIRS for part in parts[:-1]):
            return "vendor_or_build_dir"
        name = parts[-1]
        if posixpath.splitext(name)[1].lower() in self.BINARY_EXTENSIONS:
            return "binary"
        if name.endswith(self.SKIP_SUFFIXES):
            return "minified_or_bundle"
        return None

    def _content_candidates(self, entries: list[dict[str, Any]]) -> set[str]:
        """Pick which files get their content fetched, key files first."""
        def fits(entry: dict[str, Any]) -> bool:
            size = entry.get("size")
            return size is None or size <= self.max_file_size

        by_path = {entry["path"]: entry for entry in entries}
        selected = [path for path in self.KEY_FILES if path in by_path and fits(by_path[path])]

        others = sorted(
            (
                entry["path"]
                for entry in entries
                if entry["path"] not in selected
                and fits(entry)
                and (
                    posixpath.splitext(entry["path"])[1].lower() in self.CONTENT_EXTENSIONS
                    or posixpath.basename(entry["path"]).startswith(".env")
                )
            ),
            key=lambda p: (p.count("/"), p),
        )
        selected.extend(others)
        return set(selected[: self.max_content_files])

    async def _fetch_optional_content(
        self, ref: RepoReference, path: str, branch: str
    ) -> str | None:
        try:
            return await self.fetch_file_content(ref, path, branch)
        except RateLimitError:
            raise
        except FetchError as exc:
            logger.warning("Skipping content of %s in %s: %s", path, ref.full_name, exc)
            return None

    async def fetch_files(
        self, ref: RepoReference, repo_info: RepoInfo
    ) -> AsyncIterator[SourceFile]:
        """Yield the repository's scannable files.

        Single pass: the tree is fetched once and file bodies are downloaded in
        batches of ``fetch_concurrency`` concurrent requests.
        """
        branch = repo_info.default_branch
        tree = await self.fetch_tree(ref, branch)

        entries = [entry for entry in tree if not self.should_skip_path(entry["path"])]
        if len(entries) > self.max_files:
            logger.warning(
                "Capping %s at %d of %d files", ref.full_name, self.max_files, len(entries)
            )
            entries = entries[: self.max_files]

        wanted = self._content_candidates(entries)
        fetch_order = [entry for entry in entries if entry["path"] in wanted]
        contents: dict[str, str | None] = {}
        for i in range(0, len(fetch_order), self.fetch_concurrency):
            batch = fetch_order[i : i + self.fetch_concurrency]
            results = await asyncio.gather(
                *(self._fetch_optional_content(ref, entry["path"], branch) for entry in batch),
                return_exceptions=True,
            )
            # Batch siblings have all settled; surface the first failure
            for result in results:
                if isinstance(result, BaseException):
                    raise result
            for entry, content in zip(batch, results):
                contents[entry["path"]] = content

        logger.info(
            "Fetched %d file(s) from %s (%d with content)",
            len(entries),
            ref.full_name,
            sum(1 for content in contents.values() if content is not None),
        )
        for entry in entries:
            yield SourceFile(
                path=entry["path"],
                size=entry.get("size"),
                content=contents.get(entry["path"]),
            )
