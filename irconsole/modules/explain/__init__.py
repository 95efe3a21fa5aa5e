"""
Explain Module - Black Box Interface

Purpose: Stream a natural-language explanation of a command result
Interface: StreamingExplanationClient.explain(), start_session(), stream()
Hidden: Provider HTTP contract, frame parsing, prompt assembly
"""

from .client import ExplanationSession, StreamingExplanationClient, parse_frame

__all__ = ["ExplanationSession", "StreamingExplanationClient", "parse_frame"]
