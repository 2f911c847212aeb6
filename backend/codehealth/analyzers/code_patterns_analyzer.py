"""Source layout heuristics: language mix, file size, naming."""

import re
from collections import defaultdict
from typing import Sequence

from codehealth.analyzers.base import (
    JS_CONFIG_SUFFIXES,
    Analyzer,
    Category,
    Finding,
    RepoInfo,
    Severity,
    SourceFile,
)

CAMEL_PATTERN = re.compile(r"[a-z][A-Z]")


def _file_size(source_file: SourceFile) -> int:
    if source_file.size is not None:
        return source_file.size
    if source_file.content is not None:
        return len(source_file.content.encode("utf-8"))
    return 0


class CodePatternsAnalyzer(Analyzer):
    name = "code_patterns"
    category = Category.CODE_PATTERNS

    def __init__(self, large_file_bytes: int = 15_000, min_files_per_dir: int = 3) -> None:
        self.large_file_bytes = large_file_bytes
        self.min_files_per_dir = min_files_per_dir

    def check_repository(
        self, repo_info: RepoInfo, files: Sequence[SourceFile]
    ) -> list[Finding]:
        findings: list[Finding] = []
        findings.extend(self._check_language_mix(files))
        findings.extend(self._check_large_files(files))
        findings.extend(self._check_naming(files))
        return findings

    def _check_language_mix(self, files: Sequence[SourceFile]) -> list[Finding]:
        js_files = [
            f for f in files
            if f.extension in {".js", ".jsx"}
            and "node_modules" not in f.path
            and not f.path.endswith(JS_CONFIG_SUFFIXES)
            and not f.path.startswith(".")
        ]
        ts_files = [
            f for f in files
            if f.extension in {".ts", ".tsx"} and "node_modules" not in f.path
        ]
        if not js_files or not ts_files:
            return []

        ratio = len(js_files) / (len(js_files) + len(ts_files))
        if not 0.1 < ratio < 0.9:
            return []
        return [
            self.finding(
                "cp-mixed-js-ts",
                Severity.WARNING,
                "Mixed JavaScript and TypeScript files",
                f"Found {len(js_files)} JS files and {len(ts_files)} TS files. "
                "Mixing languages increases maintenance complexity.",
                "Consider migrating all files to TypeScript for consistent type safety.",
            )
        ]

    def _check_large_files(self, files: Sequence[SourceFile]) -> list[Finding]:
        large_files = sorted(
            (f for f in files if f.is_source and _file_size(f) > self.large_file_bytes),
            key=lambda f: f.path,
        )
        if not large_files:
            return []
        return [
            self.finding(
                "cp-large-files",
                Severity.INFO,
                "Large source files detected",
                f"{len(large_files)} file(s) exceed {self.large_file_bytes // 1000}KB, "
                "which may indicate they need to be split.",
                "Break large files into smaller, focused modules for better readability "
                "and maintainability.",
                file_path=large_files[0].path,
            )
        ]

    def _check_naming(self, files: Sequence[SourceFile]) -> list[Finding]:
        by_directory: dict[str, list[str]] = defaultdict(list)
        for source_file in files:
            if source_file.directory and source_file.is_source:
                by_directory[source_file.directory].append(source_file.name)

        inconsistent = 0
        for names in by_directory.values():
            if len(names) < self.min_files_per_dir:
                continue
            stems = [name.rsplit(".", 1)[0] for name in names]
            has_kebab = any("-" in stem for stem in stems)
            has_camel = any(CAMEL_PATTERN.search(stem) for stem in stems)
            if has_kebab and has_camel:
                inconsistent += 1

        if not inconsistent:
            return []
        return [
            self.finding(
                "cp-naming-inconsistent",
                Severity.INFO,
                "Inconsistent file naming conventions",
                f"{inconsistent} director(ies) have mixed naming conventions "
                "(kebab-case and camelCase).",
                "Adopt a consistent file naming convention across the project.",
            )
        ]
