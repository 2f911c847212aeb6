"""SQLAlchemy models."""

from codehealth.models.code_analysis import AnalysisStatus, CodeAnalysis

__all__ = [
    "AnalysisStatus",
    "CodeAnalysis",
]
