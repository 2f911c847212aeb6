"""Tests for testing analyzer."""

import json

import pytest

from codehealth.analyzers import Severity, TestingAnalyzer

CI = ".github/workflows/ci.yml"


def rule_ids(findings):
    return [f.rule_id for f in findings]


def sources(count, prefix="src/module"):
    return [f"{prefix}_{i}.ts" for i in range(count)]


class TestCiDetection:
    """Test CI configuration rule."""

    @pytest.fixture
    def analyzer(self):
        return TestingAnalyzer()

    def test_no_ci(self, analyzer, repo_info, make_files):
        findings = analyzer.analyze(repo_info, make_files("src/app.ts"))

        assert rule_ids(findings) == ["test-no-ci"]
        assert findings[0].severity == Severity.INFO

    @pytest.mark.parametrize("path", [CI, ".gitlab-ci.yml", ".circleci/config.yml", "Jenkinsfile"])
    def test_ci_present(self, analyzer, repo_info, make_files, path):
        assert analyzer.analyze(repo_info, make_files("src/app.ts", path)) == []


class TestTestPresence:
    """Test test-file counting rules."""

    @pytest.fixture
    def analyzer(self):
        return TestingAnalyzer()

    def test_many_sources_without_tests(self, analyzer, repo_info, make_files):
        findings = analyzer.analyze(repo_info, make_files(CI, *sources(11)))

        assert rule_ids(findings) == ["test-no-tests"]
        assert findings[0].severity == Severity.WARNING
        assert "11 source files" in findings[0].description

    def test_small_projects_are_not_judged(self, analyzer, repo_info, make_files):
        assert analyzer.analyze(repo_info, make_files(CI, *sources(10))) == []

    def test_low_test_ratio(self, analyzer, repo_info, make_files):
        files = make_files(CI, "src/module_0.test.ts", *sources(20))

        findings = analyzer.analyze(repo_info, files)

        assert rule_ids(findings) == ["test-low-ratio"]
        assert "(5.0% ratio)" in findings[0].description

    def test_healthy_ratio(self, analyzer, repo_info, make_files):
        tests = [f"tests/test_module_{i}.py" for i in range(3)]
        files = make_files(CI, *tests, *sources(20))

        assert analyzer.analyze(repo_info, files) == []

    def test_declaration_and_config_files_are_not_sources(self, analyzer, repo_info, make_files):
        files = make_files(
            CI, "vite.config.ts", *[f"types/t{i}.d.ts" for i in range(12)], *sources(10)
        )

        assert analyzer.analyze(repo_info, files) == []

    def test_threshold_is_configurable(self, repo_info, make_files):
        analyzer = TestingAnalyzer(source_file_threshold=1)

        findings = analyzer.analyze(repo_info, make_files(CI, *sources(2)))

        assert rule_ids(findings) == ["test-no-tests"]


class TestFrameworkDetection:
    """Test framework detection from manifests."""

    @pytest.fixture
    def analyzer(self):
        return TestingAnalyzer()

    def test_package_json_with_framework(self, analyzer, repo_info, make_files, package_json):
        files = make_files(CI, "package.json", contents={"package.json": package_json})

        assert analyzer.analyze(repo_info, files) == []

    def test_package_json_without_framework(self, analyzer, repo_info, make_files):
        pkg = json.dumps({"dependencies": {"react": "18.2.0"}})
        files = make_files(CI, "package.json", contents={"package.json": pkg})

        findings = analyzer.analyze(repo_info, files)

        assert rule_ids(findings) == ["test-no-framework"]
        assert findings[0].file_path == "package.json"

    def test_invalid_package_json_is_skipped(self, analyzer, repo_info, make_files):
        """A broken manifest skips the file without losing repository findings."""
        files = make_files("package.json", contents={"package.json": "{not json"})

        assert rule_ids(analyzer.analyze(repo_info, files)) == ["test-no-ci"]

    def test_pyproject_without_test_dependency(self, analyzer, repo_info, make_files):
        pyproject = '[project]\nname = "svc"\ndependencies = ["fastapi"]\n'
        files = make_files(CI, "pyproject.toml", contents={"pyproject.toml": pyproject})

        findings = analyzer.analyze(repo_info, files)

        assert rule_ids(findings) == ["test-no-framework"]
        assert findings[0].file_path == "pyproject.toml"

    def test_pyproject_with_pytest(self, analyzer, repo_info, make_files):
        pyproject = '[project.optional-dependencies]\ntest = ["pytest>=8"]\n'
        files = make_files(CI, "pyproject.toml", contents={"pyproject.toml": pyproject})

        assert analyzer.analyze(repo_info, files) == []
