"""Module labels derived from directory layout."""

from collections.abc import Iterable
from pathlib import PurePosixPath

from coursecorpus.core.document import Document


def directory_module_label(doc_id: str) -> str | None:
    """First directory component of a document id; None at the root."""
    parts = PurePosixPath(doc_id).parts
    return parts[0] if len(parts) > 1 else None


def build_module_labels(documents: Iterable[Document], mode: str = "directory") -> dict[str, str]:
    """Map document id -> module label for documents that have one."""
    if mode == "none":
        return {}
    labels = {}
    for doc in documents:
        label = directory_module_label(doc.id)
        if label is not None:
            labels[doc.id] = label
    return labels
