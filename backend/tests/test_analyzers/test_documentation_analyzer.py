"""Tests for documentation analyzer."""

import pytest

from codehealth.analyzers import DocumentationAnalyzer, Severity


def rule_ids(findings):
    return [f.rule_id for f in findings]


class TestDocumentationAnalyzer:
    """Test documentation presence rules."""

    @pytest.fixture
    def analyzer(self):
        return DocumentationAnalyzer()

    def test_missing_readme_and_license(self, analyzer, repo_info, make_files):
        findings = analyzer.analyze(repo_info, make_files("src/app.py"))

        assert rule_ids(findings) == ["doc-no-readme", "doc-no-license"]
        assert findings[0].severity == Severity.WARNING
        assert findings[1].severity == Severity.INFO

    def test_readme_name_is_case_insensitive(self, analyzer, repo_info, make_files):
        files = make_files("Readme.md", "LICENSE", "src/app.py")

        assert analyzer.analyze(repo_info, files) == []

    def test_nested_readme_does_not_count(self, analyzer, repo_info, make_files):
        files = make_files("docs/README.md", "LICENSE.txt")

        assert rule_ids(analyzer.analyze(repo_info, files)) == ["doc-no-readme"]

    def test_established_project_without_guides(self, analyzer, repo_info, make_files):
        """Projects with more than twenty files should carry extra docs."""
        sources = [f"src/module_{i}.py" for i in range(19)]
        files = make_files("README.md", "LICENSE", *sources)

        findings = analyzer.analyze(repo_info, files)

        assert rule_ids(findings) == ["doc-minimal"]

    @pytest.mark.parametrize("extra", ["CHANGELOG.md", "CONTRIBUTING.md", "docs/index.md"])
    def test_guides_satisfy_minimal_docs(self, analyzer, repo_info, make_files, extra):
        sources = [f"src/module_{i}.py" for i in range(19)]
        files = make_files("README.md", "LICENSE", extra, *sources)

        assert analyzer.analyze(repo_info, files) == []
