"""Canonical Document model for the course corpus.

A Document is one lesson file: its exact text as read, the normalized
form used only for duplicate comparison, and cheap size signals used to
skip expensive comparisons.
"""

import hashlib
import re
from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Any

_ATX_HEADING = re.compile(r"^\s{0,3}(#{1,6})\s+(.+?)\s*#*\s*$")
_SETEXT_UNDERLINE = re.compile(r"^\s{0,3}(=+|-+)\s*$")
_FENCE = re.compile(r"^\s{0,3}(```|~~~)")


@dataclass(frozen=True)
class Document:
    """A single lesson document.

    Attributes:
        id: Root-relative POSIX path; stable and unique within a load.
        raw_content: The decoded file text, exactly as read.
        canonical_content: Normalized text used for comparison only.
        title: First heading line, or a name derived from the path.
        size_bytes: Size of the file in bytes.
        line_count: Number of lines in ``raw_content``.
        metadata: Free-form provenance (absolute path, encoding).
    """

    id: str
    raw_content: str
    canonical_content: str
    title: str
    size_bytes: int
    line_count: int
    metadata: dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def is_stub(self) -> bool:
        """True when nothing comparable is left after normalization."""
        return not self.canonical_content

    @property
    def content_hash(self) -> str:
        return hashlib.sha256(self.canonical_content.encode("utf-8")).hexdigest()

    def to_dict(self, include_content: bool = False) -> dict[str, Any]:
        """Serialize to dictionary."""
        data: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "size_bytes": self.size_bytes,
            "line_count": self.line_count,
            "metadata": dict(self.metadata),
        }
        if include_content:
            data["raw_content"] = self.raw_content
            data["canonical_content"] = self.canonical_content
        return data


def extract_title(text: str) -> str | None:
    """Return the first Markdown heading outside code fences, if any."""
    in_fence = False
    previous = ""
    for line in text.splitlines():
        if _FENCE.match(line):
            in_fence = not in_fence
            previous = ""
            continue
        if in_fence:
            continue

        match = _ATX_HEADING.match(line)
        if match:
            title = match.group(2).strip()
            if title:
                return title

        # Setext: a non-blank paragraph line underlined with === or ---
        if previous.strip() and _SETEXT_UNDERLINE.match(line):
            return previous.strip()
        previous = line
    return None


def title_from_path(doc_id: str) -> str:
    """Derive a readable title from a document path."""
    path = PurePosixPath(doc_id)
    stem = path.stem
    if stem.lower() in ("readme", "index") and path.parent.name:
        stem = path.parent.name
    words = re.sub(r"[-_]+", " ", stem).split()
    return " ".join(w[:1].upper() + w[1:] for w in words) or doc_id


def count_lines(text: str) -> int:
    return len(text.splitlines())


def build_document(
    doc_id: str,
    raw_content: str,
    canonical_content: str,
    size_bytes: int | None = None,
    metadata: dict[str, Any] | None = None,
) -> Document:
    """Create a Document, deriving title and size signals from its text."""
    if size_bytes is None:
        size_bytes = len(raw_content.encode("utf-8"))
    return Document(
        id=doc_id,
        raw_content=raw_content,
        canonical_content=canonical_content,
        title=extract_title(raw_content) or title_from_path(doc_id),
        size_bytes=size_bytes,
        line_count=count_lines(raw_content),
        metadata=metadata or {},
    )
