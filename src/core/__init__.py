"""
Core Module - Shared domain models.

This module contains the canonical definitions used across the
content, study and delivery layers.

Components:
- levels: DifficultyLevel tiers and their display info
- models: DiagnosticItem, Question, MistakeRecord, MasterySummary

Design Principle:
Domain-specific modules (src/study/, src/content/, src/delivery/)
should import from src/core/ rather than redefining shared records.
"""

from src.core.levels import DifficultyLevel
from src.core.models import (
    DiagnosticItem,
    MasterySummary,
    MistakeRecord,
    Question,
)

__all__ = [
    "DifficultyLevel",
    "DiagnosticItem",
    "Question",
    "MistakeRecord",
    "MasterySummary",
]
