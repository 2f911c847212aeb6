"""Tests for GitHub URL parsing."""

import pytest

from codehealth.exceptions import InvalidUrlError
from codehealth.services.repo_url import RepoReference, parse_github_url


class TestParseGithubUrl:
    """Test accepted URL shapes."""

    @pytest.mark.parametrize(
        "url",
        [
            "https://github.com/vercel/next.js",
            "http://github.com/vercel/next.js",
            "https://www.github.com/vercel/next.js",
            "github.com/vercel/next.js",
            "  https://github.com/vercel/next.js  ",
            "https://github.com/vercel/next.js/",
            "https://github.com/vercel/next.js.git",
            "https://github.com/vercel/next.js/tree/canary/packages",
            "https://github.com/vercel/next.js?tab=readme-ov-file",
            "https://GitHub.com/vercel/next.js",
        ],
    )
    def test_accepted_forms(self, url):
        assert parse_github_url(url) == RepoReference(owner="vercel", repo="next.js")

    def test_canonical_url(self):
        assert parse_github_url("https://github.com/facebook/react") == RepoReference(
            owner="facebook", repo="react"
        )

    def test_keeps_case_and_punctuation(self):
        ref = parse_github_url("https://github.com/My-Org/my_repo.v2")

        assert ref.owner == "My-Org"
        assert ref.repo == "my_repo.v2"
        assert ref.full_name == "My-Org/my_repo.v2"
        assert ref.html_url == "https://github.com/My-Org/my_repo.v2"


class TestParseGithubUrlRejects:
    """Test rejected inputs."""

    @pytest.mark.parametrize(
        "url",
        [
            "",
            "   ",
            "https://gitlab.com/owner/repo",
            "https://github.com.evil.io/owner/repo",
            "ftp://github.com/owner/repo",
            "https://github.com/",
            "https://github.com/owner",
            "https://github.com/owner/.git",
            "https://github.com/owner/..",
            "https://github.com/own%20er/repo",
            "git@github.com:owner/repo.git",
            "not a url",
        ],
    )
    def test_rejected_forms(self, url):
        with pytest.raises(InvalidUrlError):
            parse_github_url(url)

    def test_error_message_names_input(self):
        with pytest.raises(InvalidUrlError, match="Invalid GitHub URL format: https://gitlab.com/a/b"):
            parse_github_url("https://gitlab.com/a/b")
