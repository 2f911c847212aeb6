"""Tests for analyzer base types."""

import logging

import pytest

from codehealth.analyzers import Analyzer, Category, Finding, Severity, SourceFile


class ExplodingAnalyzer(Analyzer):
    """Flags every file, failing on the ones named boom.py."""

    name = "exploding"
    category = Category.CODE_PATTERNS

    def check_file(self, repo_info, source_file):
        if source_file.name == "boom.py":
            raise RuntimeError("parser crashed")
        return [
            self.finding(
                "cp-flagged",
                Severity.INFO,
                "Flagged",
                "Flagged file.",
                "Unflag it.",
                file_path=source_file.path,
            )
        ]


class TestFinding:
    """Test Finding validation and serialization."""

    def test_requires_suggestion(self):
        """A finding without a suggestion is rejected."""
        with pytest.raises(ValueError):
            Finding(
                rule_id="x",
                category=Category.SECURITY,
                severity=Severity.INFO,
                title="t",
                description="d",
                suggestion="  ",
            )

    def test_coerces_string_enums(self):
        """Category and severity strings are coerced to enums."""
        finding = Finding("x", "testing", "warning", "t", "d", "s")

        assert finding.category is Category.TESTING
        assert finding.severity is Severity.WARNING

    def test_rejects_unknown_severity(self):
        """Only critical, warning and info are valid severities."""
        with pytest.raises(ValueError):
            Finding("x", "testing", "major", "t", "d", "s")

    def test_to_dict_omits_missing_file_path(self):
        """Repository-level findings serialize without file_path."""
        data = Finding("doc-no-readme", "documentation", "warning", "t", "d", "s").to_dict()

        assert data == {
            "id": "doc-no-readme",
            "category": "documentation",
            "severity": "warning",
            "title": "t",
            "description": "d",
            "suggestion": "s",
        }

    def test_from_dict_reads_stored_shape(self):
        """Stored findings load back into Finding objects."""
        finding = Finding.from_dict(
            {
                "id": "cfg-no-strict",
                "category": "config-quality",
                "severity": "warning",
                "title": "t",
                "description": "d",
                "suggestion": "s",
                "file_path": "tsconfig.json",
            }
        )

        assert finding.rule_id == "cfg-no-strict"
        assert finding.file_path == "tsconfig.json"


class TestSourceFile:
    """Test SourceFile path helpers."""

    def test_path_properties(self):
        source_file = SourceFile(path="src/components/Button.TSX")

        assert source_file.name == "Button.TSX"
        assert source_file.directory == "src/components"
        assert source_file.extension == ".tsx"
        assert source_file.depth == 3
        assert source_file.is_source

    def test_node_modules_is_not_source(self):
        assert not SourceFile(path="node_modules/lib/index.js").is_source


class TestAnalyzerIsolation:
    """Test per-file error isolation."""

    def test_failing_file_is_skipped(self, repo_info, caplog):
        """An exception on one file does not drop findings for the others."""
        files = [SourceFile(path="a.py"), SourceFile(path="boom.py"), SourceFile(path="b.py")]

        with caplog.at_level(logging.WARNING):
            findings = ExplodingAnalyzer().analyze(repo_info, files)

        assert [f.file_path for f in findings] == ["a.py", "b.py"]
        assert "boom.py" in caplog.text
