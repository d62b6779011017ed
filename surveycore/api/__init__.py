"""Python API wrapper.

The :class:`SurveyEngine` facade is the single unified entry point for
all pipeline stages.
"""

from surveycore.api.facade import SurveyEngine

__all__ = ["SurveyEngine"]
