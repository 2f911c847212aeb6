"""Dependency manifest checks."""

import json
from typing import Sequence

from codehealth.analyzers.base import (
    Analyzer,
    Category,
    Finding,
    RepoInfo,
    Severity,
    SourceFile,
    paths_of,
)

JS_LOCKFILES = {"package-lock.json", "yarn.lock", "pnpm-lock.yaml", "bun.lockb", "bun.lock"}

DEV_TOOL_MARKERS = (
    "eslint", "prettier", "jest", "vitest", "typescript", "@types/",
    "webpack", "rollup", "vite", "nodemon", "ts-node",
)


class DependencyAnalyzer(Analyzer):
    name = "dependencies"
    category = Category.DEPENDENCIES

    def __init__(self, max_dependencies: int = 30) -> None:
        self.max_dependencies = max_dependencies

    def check_repository(
        self, repo_info: RepoInfo, files: Sequence[SourceFile]
    ) -> list[Finding]:
        paths = paths_of(files)
        if "package.json" in paths and not paths & JS_LOCKFILES:
            return [
                self.finding(
                    "dep-no-lockfile",
                    Severity.WARNING,
                    "No lockfile found",
                    "The project has a package.json but no lockfile "
                    "(package-lock.json, yarn.lock, pnpm-lock.yaml, bun.lockb).",
                    "Run npm install, yarn install, or pnpm install to generate a lockfile "
                    "for reproducible builds.",
                    file_path="package.json",
                )
            ]
        return []

    def check_file(self, repo_info: RepoInfo, source_file: SourceFile) -> list[Finding]:
        if source_file.content is None:
            return []
        if source_file.path == "package.json":
            return self._check_package_json(source_file)
        if source_file.path == "requirements.txt":
            return self._check_requirements(source_file)
        return []

    def _check_package_json(self, source_file: SourceFile) -> list[Finding]:
        try:
            pkg = json.loads(source_file.content)
        except json.JSONDecodeError:
            pkg = None
        if not isinstance(pkg, dict):
            return [
                self.finding(
                    "dep-invalid-pkg",
                    Severity.CRITICAL,
                    "Invalid package.json",
                    "The package.json file contains invalid JSON and cannot be parsed.",
                    "Fix the JSON syntax errors in package.json.",
                    file_path=source_file.path,
                )
            ]

        findings: list[Finding] = []
        deps = list((pkg.get("dependencies") or {}).keys())

        dev_in_prod = [d for d in deps if any(marker in d for marker in DEV_TOOL_MARKERS)]
        if dev_in_prod:
            findings.append(
                self.finding(
                    "dep-dev-in-prod",
                    Severity.WARNING,
                    "Dev dependencies in production",
                    "The following packages are likely development tools but are listed "
                    f"in dependencies: {', '.join(dev_in_prod)}.",
                    "Move these packages to devDependencies to reduce production bundle size.",
                    file_path=source_file.path,
                )
            )

        if len(deps) > self.max_dependencies:
            findings.append(
                self.finding(
                    "dep-too-many",
                    Severity.INFO,
                    "Large number of dependencies",
                    f"The project has {len(deps)} production dependencies. "
                    "This may increase bundle size and security surface.",
                    "Review dependencies and remove unused ones. Consider using bundler tree-shaking.",
                    file_path=source_file.path,
                )
            )

        if not pkg.get("scripts"):
            findings.append(
                self.finding(
                    "dep-no-scripts",
                    Severity.INFO,
                    "No npm scripts defined",
                    "No scripts are defined in package.json.",
                    'Add common scripts like "dev", "build", "test", and "lint" '
                    "for standardized workflows.",
                    file_path=source_file.path,
                )
            )

        return findings

    def _check_requirements(self, source_file: SourceFile) -> list[Finding]:
        unpinned = []
        for raw_line in source_file.content.splitlines():
            line = raw_line.split("#", 1)[0].strip()
            if not line or line.startswith("-"):
                continue
            if "==" not in line and "@" not in line:
                unpinned.append(line)

        if not unpinned:
            return []
        return [
            self.finding(
                "dep-unpinned-python",
                Severity.INFO,
                "Unpinned Python requirements",
                f"{len(unpinned)} requirement(s) are not pinned to an exact version: "
                f"{', '.join(unpinned[:5])}{' and more' if len(unpinned) > 5 else ''}.",
                "Pin versions with == or use a lock file (pip-tools, uv, poetry) "
                "for reproducible installs.",
                file_path=source_file.path,
            )
        ]
