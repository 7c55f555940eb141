"""
Terminal presentation for the ascent quiz.

Components:
- quiz_visuals: Rich panels for the self-assessment, questions,
  answer feedback, mastery screen and mistake book
"""

from . import quiz_visuals

__all__ = ["quiz_visuals"]
