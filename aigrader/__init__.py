"""
AI visibility grading: checks whether a page is cited by Google AI Overviews,
Perplexity and ChatGPT, and scores it from 0 to 100.
"""

from aigrader.visibility_hub import check_ai_visibility

__all__ = ["check_ai_visibility"]
