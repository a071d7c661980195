"""Error taxonomy for the course corpus loader.

Only ``CorpusRootError`` and ``ConfigError`` are raised to callers. The
other errors are collected during a load and surfaced in the report.
"""

from typing import Any


class CorpusError(Exception):
    """Base class for all corpus loader errors."""

    kind = "corpus_error"

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "message": str(self)}


class CorpusRootError(CorpusError):
    """The corpus root directory cannot be enumerated at all."""

    kind = "root_error"

    def __init__(self, root: str, reason: str):
        self.root = root
        self.reason = reason
        super().__init__(f"Cannot enumerate corpus root {root}: {reason}")


class ConfigError(CorpusError, ValueError):
    """Invalid loader configuration."""

    kind = "config_error"


class ReadError(CorpusError):
    """A file could not be read or decoded as text."""

    kind = "read_error"

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read {path}: {reason}")

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "path": self.path, "reason": self.reason}


class UnresolvedReferenceError(CorpusError):
    """A declared ordering reference matches no duplicate cluster."""

    kind = "unresolved_reference"

    def __init__(self, source: str, position: int, title: str | None, path: str | None):
        self.source = source
        self.position = position
        self.title = title
        self.path = path
        target = path or title or "<empty reference>"
        super().__init__(f"{source}#{position}: reference {target!r} matches no document")

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "source": self.source,
            "position": self.position,
            "title": self.title,
            "path": self.path,
        }


class OrderingConflictError(CorpusError):
    """Two ordering declarations place the same cluster at different positions.

    The later-processed declaration wins; this error records the loser.
    """

    kind = "ordering_conflict"

    def __init__(
        self,
        canonical_id: str,
        previous_source: str,
        previous_position: int,
        winning_source: str,
        winning_position: int,
    ):
        self.canonical_id = canonical_id
        self.previous_source = previous_source
        self.previous_position = previous_position
        self.winning_source = winning_source
        self.winning_position = winning_position
        super().__init__(
            f"{canonical_id}: position {previous_position} from {previous_source} "
            f"overridden by position {winning_position} from {winning_source}"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "canonical_id": self.canonical_id,
            "previous_source": self.previous_source,
            "previous_position": self.previous_position,
            "winning_source": self.winning_source,
            "winning_position": self.winning_position,
        }
