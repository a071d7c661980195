"""Exact document-level duplicate grouping."""

import hashlib
from collections.abc import Iterable

from coursecorpus.core.document import Document


class ExactIndex:
    """Group documents whose canonical content is byte-identical."""

    def __init__(self) -> None:
        self._groups: dict[str, list[str]] = {}  # hash -> doc ids in discovery order

    @staticmethod
    def hash_text(text: str) -> str:
        return hashlib.sha256(text.encode("utf-8")).hexdigest()

    def add(self, doc: Document) -> tuple[bool, str]:
        """Register a document.

        Returns:
            (is_first, hash): True if this content has not been seen before.
        """
        doc_hash = self.hash_text(doc.canonical_content)
        group = self._groups.setdefault(doc_hash, [])
        group.append(doc.id)
        return len(group) == 1, doc_hash

    def add_all(self, docs: Iterable[Document]) -> "ExactIndex":
        for doc in docs:
            self.add(doc)
        return self

    def groups(self) -> list[list[str]]:
        """All groups, in order of first discovery."""
        return [list(ids) for ids in self._groups.values()]

    def duplicate_groups(self) -> list[list[str]]:
        return [ids for ids in self.groups() if len(ids) > 1]

    def reset(self) -> None:
        self._groups.clear()

    @property
    def stats(self) -> dict[str, int]:
        total = sum(len(ids) for ids in self._groups.values())
        return {
            "unique_contents": len(self._groups),
            "total_docs": total,
            "exact_duplicates": total - len(self._groups),
        }
