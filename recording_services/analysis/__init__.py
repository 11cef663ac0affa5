"""
Summary and report generation with pluggable providers
"""

from .parsing import parse_report, parse_summary
from .providers import OllamaAnalysisProvider, OpenAIAnalysisProvider
from .service import AnalysisService

__all__ = [
    "AnalysisService",
    "OllamaAnalysisProvider",
    "OpenAIAnalysisProvider",
    "parse_report",
    "parse_summary",
]
