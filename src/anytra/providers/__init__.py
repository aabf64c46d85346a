"""
Completion backends behind the LLMProvider interface.
"""

from .base import BaseProvider
from .openrouter import OpenRouterProvider

__all__ = ["BaseProvider", "OpenRouterProvider"]
