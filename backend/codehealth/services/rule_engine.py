"""Runs the analyzer registry over a fetched file set."""

import logging
from typing import Sequence

from codehealth.analyzers import Analyzer, Finding, RepoInfo, SourceFile, build_default_analyzers

logger = logging.getLogger(__name__)


class RuleEngine:
    """Runs analyzers in declared order and concatenates their findings."""

    def __init__(self, analyzers: Sequence[Analyzer] | None = None):
        self.analyzers = list(analyzers) if analyzers is not None else build_default_analyzers()

    @property
    def analyzer_names(self) -> list[str]:
        return [analyzer.name for analyzer in self.analyzers]

    def run(self, repo_info: RepoInfo, files: Sequence[SourceFile]) -> list[Finding]:
        findings: list[Finding] = []
        for analyzer in self.analyzers:
            produced = analyzer.analyze(repo_info, files)
            logger.debug("Analyzer %s produced %d finding(s)", analyzer.name, len(produced))
            findings.extend(produced)

        logger.info(
            "Analyzed %s/%s: %d file(s), %d finding(s)",
            repo_info.owner,
            repo_info.repo,
            len(files),
            len(findings),
        )
        return findings
