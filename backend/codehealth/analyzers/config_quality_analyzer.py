"""Tooling configuration checks."""

import re
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

LINTER_CONFIGS = {
    ".eslintrc", ".eslintrc.js", ".eslintrc.json", ".eslintrc.yml", ".eslintrc.yaml",
    ".eslintrc.cjs", "eslint.config.js", "eslint.config.mjs", "eslint.config.ts",
    ".biome.json", "biome.json", ".oxlintrc.json",
    ".flake8", ".pylintrc", "ruff.toml", ".ruff.toml",
}

FORMATTER_CONFIGS = {
    ".prettierrc", ".prettierrc.js", ".prettierrc.json", ".prettierrc.yml",
    ".prettierrc.yaml", ".prettierrc.cjs", "prettier.config.js", "prettier.config.mjs",
    ".biome.json", "biome.json", ".editorconfig",
}

# tsconfig allows comments, so a regex is used instead of json.loads
STRICT_PATTERN = re.compile(r'"strict"\s*:\s*true')


class ConfigQualityAnalyzer(Analyzer):
    name = "config_quality"
    category = Category.CONFIG_QUALITY

    def check_repository(
        self, repo_info: RepoInfo, files: Sequence[SourceFile]
    ) -> list[Finding]:
        findings: list[Finding] = []
        paths = paths_of(files)
        contents = {f.path: f.content for f in files if f.content is not None}

        if ".gitignore" not in paths:
            findings.append(
                self.finding(
                    "cfg-no-gitignore",
                    Severity.WARNING,
                    "No .gitignore file",
                    "The project is missing a .gitignore file. "
                    "This may lead to committing unwanted files.",
                    "Add a .gitignore file appropriate for your project type.",
                )
            )

        if not paths & LINTER_CONFIGS and not self._linter_in_manifests(contents):
            findings.append(
                self.finding(
                    "cfg-no-linter",
                    Severity.INFO,
                    "No linter configuration found",
                    "No ESLint, Biome, OxLint, Ruff, Flake8 or Pylint configuration was detected.",
                    "Add a linter to enforce code quality standards.",
                )
            )

        if not paths & FORMATTER_CONFIGS and not self._formatter_in_manifests(contents):
            findings.append(
                self.finding(
                    "cfg-no-formatter",
                    Severity.INFO,
                    "No code formatter configuration",
                    "No Prettier, Biome, Black, Ruff format or EditorConfig configuration was found.",
                    "Add a code formatter for consistent code style across the team.",
                )
            )

        return findings

    def check_file(self, repo_info: RepoInfo, source_file: SourceFile) -> list[Finding]:
        if source_file.path != "tsconfig.json" or source_file.content is None:
            return []
        if STRICT_PATTERN.search(source_file.content):
            return []
        return [
            self.finding(
                "cfg-no-strict",
                Severity.WARNING,
                "TypeScript strict mode not enabled",
                'The tsconfig.json does not have "strict": true. '
                "Strict mode catches more potential errors.",
                'Enable "strict": true in tsconfig.json compilerOptions.',
                file_path=source_file.path,
            )
        ]

    def _linter_in_manifests(self, contents: dict[str, str]) -> bool:
        if '"eslintConfig"' in contents.get("package.json", ""):
            return True
        pyproject = contents.get("pyproject.toml", "")
        return any(section in pyproject for section in ("[tool.ruff", "[tool.pylint", "[tool.flake8"))

    def _formatter_in_manifests(self, contents: dict[str, str]) -> bool:
        if '"prettier"' in contents.get("package.json", ""):
            return True
        pyproject = contents.get("pyproject.toml", "")
        return any(section in pyproject for section in ("[tool.black", "[tool.ruff.format"))
