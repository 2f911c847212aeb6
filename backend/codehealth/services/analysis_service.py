"""Analysis orchestrator: URL to persisted, scored findings."""

import asyncio
import logging
from datetime import datetime, timezone
from uuid import UUID

from codehealth.analyzers import Finding, RepoInfo, SourceFile
from codehealth.exceptions import (
    AnalysisFailedError,
    AnalysisNotFoundError,
    AnalysisTimeoutError,
    GitHubError,
)
from codehealth.models.code_analysis import AnalysisStatus, CodeAnalysis
from codehealth.services.analysis_store import AnalysisStore
from codehealth.services.github_service import GitHubService
from codehealth.services.repo_url import RepoReference, parse_github_url
from codehealth.services.rule_engine import RuleEngine
from codehealth.services.scoring_service import AnalysisSummary, summarize

logger = logging.getLogger(__name__)


class AnalysisService:
    """Runs one repository analysis and records its outcome.

    A record is created in the running state before any GitHub call and moves
    to completed or failed exactly once. Findings and summary are written in
    the same update that marks the record completed.
    """

    def __init__(
        self,
        store: AnalysisStore,
        github: GitHubService,
        engine: RuleEngine | None = None,
        timeout_seconds: float = 120.0,
    ):
        self.store = store
        self.github = github
        self.engine = engine or RuleEngine()
        self.timeout_seconds = timeout_seconds

    async def start_analysis(
        self, repo_url: str, service_id: UUID, user_id: UUID
    ) -> CodeAnalysis:
        """Validate the URL and create the running record.

        Raises:
            InvalidUrlError: URL rejected; no record is created.
        """
        ref = parse_github_url(repo_url)
        analysis = await self.store.insert(
            {
                "service_id": service_id,
                "user_id": user_id,
                "repo_url": repo_url.strip(),
                "repo_owner": ref.owner,
                "repo_name": ref.repo,
                "status": AnalysisStatus.RUNNING.value,
            }
        )
        logger.info("Started analysis %s for %s", analysis.id, ref.full_name)
        return analysis

    async def _collect(self, ref: RepoReference) -> tuple[RepoInfo, list[SourceFile]]:
        repo_info = await self.github.fetch_repo_info(ref)
        files = [source_file async for source_file in self.github.fetch_files(ref, repo_info)]
        return repo_info, files

    async def _analyze(self, ref: RepoReference) -> tuple[list[Finding], AnalysisSummary]:
        repo_info, files = await self._collect(ref)
        findings = self.engine.run(repo_info, files)
        return findings, summarize(findings)

    async def _mark_failed(self, analysis: CodeAnalysis, message: str) -> AnalysisFailedError:
        await self.store.update(
            analysis.id,
            {"status": AnalysisStatus.FAILED.value, "error_message": message},
        )
        return AnalysisFailedError(message, str(analysis.id))

    async def execute_analysis(self, analysis: CodeAnalysis) -> CodeAnalysis:
        """Fetch, evaluate and score a running analysis.

        Raises:
            AnalysisFailedError: Fetching or evaluation failed or timed out. The
                record has already been moved to failed.
            PersistenceError: The terminal update could not be written.
        """
        ref = RepoReference(owner=analysis.repo_owner, repo=analysis.repo_name)
        try:
            findings, summary = await asyncio.wait_for(
                self._analyze(ref), timeout=self.timeout_seconds
            )
        except asyncio.TimeoutError as exc:
            error = AnalysisTimeoutError(
                f"Analysis timed out after {self.timeout_seconds:g} seconds"
            )
            logger.warning("Analysis %s of %s: %s", analysis.id, ref.full_name, error)
            raise await self._mark_failed(analysis, str(error)) from exc
        except GitHubError as exc:
            logger.warning("Analysis %s of %s failed: %s", analysis.id, ref.full_name, exc)
            raise await self._mark_failed(analysis, str(exc)) from exc
        except Exception as exc:
            logger.exception("Analysis %s of %s failed", analysis.id, ref.full_name)
            message = str(exc) or exc.__class__.__name__
            raise await self._mark_failed(analysis, message) from exc

        completed = await self.store.update(
            analysis.id,
            {
                "status": AnalysisStatus.COMPLETED.value,
                "findings": [finding.to_dict() for finding in findings],
                "summary": summary.to_dict(),
                "error_message": None,
                "analyzed_at": datetime.now(timezone.utc),
            },
        )
        logger.info(
            "Completed analysis %s of %s: %d finding(s), health score %d",
            analysis.id,
            ref.full_name,
            summary.total_findings,
            summary.health_score,
        )
        return completed

    async def run_analysis(
        self, repo_url: str, service_id: UUID, user_id: UUID
    ) -> CodeAnalysis:
        """Analyze a repository end to end and return the completed record."""
        analysis = await self.start_analysis(repo_url, service_id, user_id)
        return await self.execute_analysis(analysis)

    async def list_analyses(self, service_id: UUID) -> list[CodeAnalysis]:
        return await self.store.list_by_service(service_id)

    async def get_analysis(self, analysis_id: UUID) -> CodeAnalysis:
        analysis = await self.store.get_by_id(analysis_id)
        if analysis is None:
            raise AnalysisNotFoundError(f"Analysis not found: {analysis_id}")
        return analysis

    async def delete_analysis(self, analysis_id: UUID) -> None:
        await self.store.delete(analysis_id)
        logger.info("Deleted analysis %s", analysis_id)
