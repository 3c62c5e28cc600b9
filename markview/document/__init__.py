"""Document loading and structural summaries."""

from .source import read_text, sanitize_terminal_text
from .summary import CodeFence, DocumentSummary, HeadingNode, code_fences, load_document, summarize_markdown

__all__ = [
    "CodeFence",
    "DocumentSummary",
    "HeadingNode",
    "code_fences",
    "load_document",
    "read_text",
    "sanitize_terminal_text",
    "summarize_markdown",
]
