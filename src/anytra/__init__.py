"""
anytra: an MCP stdio server that enhances prompts through an LLM backend,
with validation, confidence scoring and optional sequential refinement.
"""

__version__ = "0.1.0"
