"""
Content: Question bank and diagnostic questionnaire sources.

Core modules:
- loader: JSON loading, Pydantic validation, repositories by level

Bundled data lives in data/ (question_bank.json, diagnostic.json).
"""

from .loader import (
    InMemoryQuestionRepository,
    JsonDiagnosticSource,
    JsonQuestionRepository,
    QuestionBankError,
    StaticDiagnosticSource,
)

__all__ = [
    "InMemoryQuestionRepository",
    "JsonQuestionRepository",
    "StaticDiagnosticSource",
    "JsonDiagnosticSource",
    "QuestionBankError",
]
