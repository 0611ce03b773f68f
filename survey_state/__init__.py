"""
Survey State Package.

Tracks which survey the user is working on across pages.
"""

from .survey_name import SurveyNameStore, format_title

__all__ = ["SurveyNameStore", "format_title"]
