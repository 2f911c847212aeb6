"""Security analyzer: committed secrets and credential files."""

import re
from typing import Sequence

from codehealth.analyzers.base import (
    Analyzer,
    Category,
    Finding,
    RepoInfo,
    Severity,
    SourceFile,
)
from codehealth.analyzers.patterns import PatternRule, match_patterns

ENV_TEMPLATE_SUFFIXES = (".example", ".sample", ".template")

SECRET_FILE_NAMES = {"credentials.json", "service-account.json", "gcp-key.json"}
SECRET_FILE_SUFFIXES = (".pem", ".key", ".p12", ".pfx", "id_rsa", "id_ed25519", "id_ecdsa")

SECRET_RULES = [
    PatternRule(
        rule_id="sec-hardcoded-secret",
        title="Hard-coded access token",
        description="A string matching a known access token format was found in source.",
        severity=Severity.CRITICAL,
        suggestion="Remove the token from the repository, rotate it, and load it from "
        "environment variables or a secret manager.",
        pattern=(
            r"ghp_[a-zA-Z0-9]{36}"
            r"|github_pat_[a-zA-Z0-9]{22}_[a-zA-Z0-9]{59}"
            r"|AKIA[0-9A-Z]{16}"
            r"|sk_live_[a-zA-Z0-9]{24,}"
            r"|xox[bp]-[0-9]{10,13}-[0-9]{10,13}-[a-zA-Z0-9]{24}"
            r"|-----BEGIN (?:RSA |EC |OPENSSH |DSA )?PRIVATE KEY-----"
        ),
    ),
    PatternRule(
        rule_id="sec-hardcoded-credential",
        title="Potential credential in source",
        description="A secret-like variable is assigned a string literal.",
        severity=Severity.WARNING,
        suggestion="Move secrets to a secret manager or environment variables.",
        pattern=r"(api_key|apikey|secret|token|password)\s*[:=]\s*[\"'][^\"'\s]{8,}[\"']",
        flags=re.IGNORECASE,
    ),
]


def _is_env_file(name: str) -> bool:
    if name != ".env" and not name.startswith(".env."):
        return False
    return not name.endswith(ENV_TEMPLATE_SUFFIXES)


def _is_secret_file(name: str) -> bool:
    return name in SECRET_FILE_NAMES or name.endswith(SECRET_FILE_SUFFIXES)


class SecurityAnalyzer(Analyzer):
    name = "security"
    category = Category.SECURITY

    def check_repository(
        self, repo_info: RepoInfo, files: Sequence[SourceFile]
    ) -> list[Finding]:
        findings: list[Finding] = []

        env_files = [f.path for f in files if _is_env_file(f.name)]
        if env_files:
            findings.append(
                self.finding(
                    "sec-env-exposed",
                    Severity.CRITICAL,
                    "Environment files committed to repository",
                    f"Found committed environment files: {', '.join(env_files)}. "
                    "These may contain secrets.",
                    "Remove .env files from the repository and add them to .gitignore. "
                    "Use .env.example for templates.",
                    file_path=env_files[0],
                )
            )

        secret_files = [f.path for f in files if _is_secret_file(f.name)]
        if secret_files:
            more = f" and {len(secret_files) - 5} more" if len(secret_files) > 5 else ""
            findings.append(
                self.finding(
                    "sec-secret-files",
                    Severity.CRITICAL,
                    "Potential secret files in repository",
                    f"Found files that may contain secrets: {', '.join(secret_files[:5])}{more}.",
                    "Remove secret files from the repository, rotate compromised credentials, "
                    "and add patterns to .gitignore.",
                    file_path=secret_files[0],
                )
            )

        return findings

    def check_file(self, repo_info: RepoInfo, source_file: SourceFile) -> list[Finding]:
        if source_file.content is None:
            return []
        if _is_env_file(source_file.name) or _is_secret_file(source_file.name):
            return []
        return match_patterns(source_file.path, source_file.content, SECRET_RULES, self.category)
