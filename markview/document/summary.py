"""Structural document summary built from the Markdown token stream.

The summary is the only thing the navigation engine knows about a document:
line count, heading nodes, raw text for search, and structural element counts.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from markdown_it import MarkdownIt
from markdown_it.token import Token

from .source import read_text

logger = logging.getLogger(__name__)

_TEXT_TOKEN_TYPES = frozenset({"text", "code_inline"})
_BREAK_TOKEN_TYPES = frozenset({"softbreak", "hardbreak"})


@dataclass(frozen=True)
class HeadingNode:
    """One heading from the structural tree; ``line`` is 0-based."""

    level: int
    title: str
    line: int


@dataclass(frozen=True)
class DocumentSummary:
    text: str
    line_count: int
    headings: tuple[HeadingNode, ...] = ()
    image_count: int = 0
    code_block_count: int = 0
    table_count: int = 0

    @property
    def lines(self) -> list[str]:
        return self.text.splitlines()


@dataclass(frozen=True)
class CodeFence:
    """Fenced code body lines ``[start, end)`` (0-based) and the info-string language."""

    start: int
    end: int
    language: str


def _markdown_parser() -> MarkdownIt:
    return MarkdownIt("commonmark").enable("table")


def code_fences(text: str) -> list[CodeFence]:
    """Locate fenced code bodies; opening and closing marker lines are excluded."""
    lines = text.splitlines()
    fences: list[CodeFence] = []
    for token in _markdown_parser().parse(text):
        if token.type != "fence" or token.map is None:
            continue
        start, end = token.map
        body_end = end
        # Unterminated fences run to the end of the document without a closing marker.
        if end - start >= 2 and end - 1 < len(lines) and lines[end - 1].strip().startswith(token.markup):
            body_end = end - 1
        language = token.info.split()[0] if token.info.strip() else ""
        fences.append(CodeFence(start=start + 1, end=max(start + 1, body_end), language=language))
    return fences


def _inline_plain_text(children: list[Token] | None) -> str:
    """Flatten inline children to plain text, dropping markup."""
    if not children:
        return ""
    parts: list[str] = []
    for child in children:
        if child.type in _TEXT_TOKEN_TYPES:
            parts.append(child.content)
        elif child.type in _BREAK_TOKEN_TYPES:
            parts.append(" ")
        elif child.children:
            parts.append(_inline_plain_text(child.children))
    return "".join(parts)


def _count_images(children: list[Token] | None) -> int:
    if not children:
        return 0
    total = 0
    for child in children:
        if child.type == "image":
            total += 1
        total += _count_images(child.children)
    return total


def summarize_markdown(text: str) -> DocumentSummary:
    """Parse ``text`` and collect headings, images, code blocks, and tables.

    Heading titles are the plain text of their inline children. Headings
    without a source map (never produced by the block parser) are skipped.
    """
    tokens = _markdown_parser().parse(text)
    headings: list[HeadingNode] = []
    image_count = 0
    code_block_count = 0
    table_count = 0

    for idx, token in enumerate(tokens):
        if token.type == "heading_open":
            if token.map is None:
                continue
            inline = tokens[idx + 1] if idx + 1 < len(tokens) else None
            title = _inline_plain_text(inline.children if inline is not None else None)
            headings.append(HeadingNode(level=int(token.tag[1:]), title=" ".join(title.split()), line=token.map[0]))
        elif token.type == "inline":
            image_count += _count_images(token.children)
        elif token.type in {"fence", "code_block"}:
            code_block_count += 1
        elif token.type == "table_open":
            table_count += 1

    summary = DocumentSummary(
        text=text,
        line_count=len(text.splitlines()),
        headings=tuple(headings),
        image_count=image_count,
        code_block_count=code_block_count,
        table_count=table_count,
    )
    logger.debug(
        "Summarized document: lines=%d headings=%d images=%d code_blocks=%d tables=%d",
        summary.line_count,
        len(summary.headings),
        summary.image_count,
        summary.code_block_count,
        summary.table_count,
    )
    return summary


def load_document(path: Path) -> DocumentSummary:
    """Read ``path`` and summarize it."""
    return summarize_markdown(read_text(path))
