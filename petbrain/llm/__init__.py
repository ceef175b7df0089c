# petbrain/llm/__init__.py
"""Completion service interface."""

from .types import CompletionClient, CompletionRequest, CompletionResponse

__all__ = ["CompletionClient", "CompletionRequest", "CompletionResponse"]
