"""Documentation presence checks."""

from typing import Sequence

from codehealth.analyzers.base import (
    Analyzer,
    Category,
    Finding,
    RepoInfo,
    Severity,
    SourceFile,
)

README_NAMES = {"readme.md", "readme", "readme.txt", "readme.rst"}
LICENSE_NAMES = {"license", "license.md", "license.txt", "licence", "licence.md", "copying"}
CONTRIBUTING_NAMES = {"contributing.md", "contributing"}
CHANGELOG_NAMES = {"changelog.md", "changelog", "changes.md", "history.md"}


class DocumentationAnalyzer(Analyzer):
    name = "documentation"
    category = Category.DOCUMENTATION

    def __init__(self, established_file_count: int = 20) -> None:
        self.established_file_count = established_file_count

    def check_repository(
        self, repo_info: RepoInfo, files: Sequence[SourceFile]
    ) -> list[Finding]:
        findings: list[Finding] = []
        root_names = {f.path.lower() for f in files if "/" not in f.path}

        if not root_names & README_NAMES:
            findings.append(
                self.finding(
                    "doc-no-readme",
                    Severity.WARNING,
                    "No README file",
                    "The project is missing a README file. "
                    "A README is essential for project documentation.",
                    "Add a README.md with project description, setup instructions, "
                    "and usage examples.",
                )
            )

        if not root_names & LICENSE_NAMES:
            findings.append(
                self.finding(
                    "doc-no-license",
                    Severity.INFO,
                    "No LICENSE file",
                    "The project does not include a LICENSE file. "
                    "Without a license, the code is under default copyright.",
                    "Add an appropriate open source license (MIT, Apache-2.0, etc.) "
                    "or a proprietary license.",
                )
            )

        has_docs = any(f.path.startswith(("docs/", "doc/")) for f in files)
        has_guides = bool(root_names & (CONTRIBUTING_NAMES | CHANGELOG_NAMES))
        # Only established projects are expected to carry extra docs
        if len(files) > self.established_file_count and not has_docs and not has_guides:
            findings.append(
                self.finding(
                    "doc-minimal",
                    Severity.INFO,
                    "Minimal documentation",
                    "The project has no docs/ directory, CONTRIBUTING guide, or CHANGELOG. "
                    "For a project of this size, more documentation would help contributors.",
                    "Consider adding a docs/ directory with guides, a CONTRIBUTING.md, "
                    "and a CHANGELOG.md.",
                )
            )

        return findings
