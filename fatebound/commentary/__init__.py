"""
Commentary module - Generated flavor text with local fallbacks.
"""

from .client import CommentaryService
from .fallbacks import FALLBACK_COMMENTARY, FALLBACK_TIPS
from .prompts import CommentaryPrompts

__all__ = [
    "CommentaryService",
    "CommentaryPrompts",
    "FALLBACK_COMMENTARY",
    "FALLBACK_TIPS",
]
