"""Declared ordering references."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class OrderingReference:
    """One entry of a declared ordering list.

    Attributes:
        position: 1-based position within its source.
        title: Declared lesson title, if any.
        path: Root-relative POSIX path of the lesson, if any.
        module_label: Grouping label the source assigns to this entry.
    """

    position: int
    title: str | None = None
    path: str | None = None
    module_label: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "position": self.position,
            "title": self.title,
            "path": self.path,
            "module_label": self.module_label,
        }


@dataclass(frozen=True)
class OrderingSource:
    """An ordered list of references declared by one index document."""

    name: str
    references: tuple[OrderingReference, ...] = field(default_factory=tuple)

    @classmethod
    def from_entries(cls, name: str, entries: list[dict[str, Any] | str]) -> "OrderingSource":
        """Build from plain entries: a path string or a {title, path, module_label} dict."""
        refs = []
        for position, entry in enumerate(entries, start=1):
            if isinstance(entry, str):
                refs.append(OrderingReference(position=position, path=entry))
            else:
                refs.append(OrderingReference(
                    position=position,
                    title=entry.get("title"),
                    path=entry.get("path"),
                    module_label=entry.get("module_label"),
                ))
        return cls(name=name, references=tuple(refs))

    def __len__(self) -> int:
        return len(self.references)
