"""
Analysis provider implementations
"""

from .base import JSONChatAnalysisProvider
from .ollama import OllamaAnalysisProvider
from .openai import OpenAIAnalysisProvider

__all__ = ["JSONChatAnalysisProvider", "OllamaAnalysisProvider", "OpenAIAnalysisProvider"]
