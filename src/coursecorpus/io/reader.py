"""Directory reader for lesson documents."""

import logging
import os
from collections.abc import Callable, Iterable, Iterator
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from coursecorpus.config.schema import NormalizerConfig, ReaderConfig
from coursecorpus.core.document import Document, build_document
from coursecorpus.errors import CorpusRootError, ReadError
from coursecorpus.operators.normalize import Normalizer

logger = logging.getLogger(__name__)


class DocumentReader:
    """Walk a corpus directory and read its text documents.

    Iteration is lazy and restartable: every pass re-walks the tree in
    sorted path order. Files that cannot be read or decoded are skipped
    and recorded in ``errors`` for the most recent pass.
    """

    def __init__(
        self,
        root: str | Path,
        config: ReaderConfig | None = None,
        normalizer: Callable[[str], str] | None = None,
        exclude_paths: Iterable[str] = (),
    ):
        self.root = Path(root)
        self.config = config or ReaderConfig()
        self.normalizer = normalizer or Normalizer(NormalizerConfig())
        self.exclude_paths = set(exclude_paths)
        self.errors: list[ReadError] = []

    def _check_root(self) -> None:
        if not self.root.exists():
            raise CorpusRootError(str(self.root), "does not exist")
        if not self.root.is_dir():
            raise CorpusRootError(str(self.root), "not a directory")
        try:
            with os.scandir(self.root):
                pass
        except OSError as e:
            raise CorpusRootError(str(self.root), e.strerror or str(e)) from e

    def _skip_dir(self, name: str) -> bool:
        if name in self.config.exclude_dirs:
            return True
        return name.startswith(".") and not self.config.include_hidden

    def _accept_file(self, name: str, doc_id: str) -> bool:
        if doc_id in self.exclude_paths:
            return False
        if name.startswith(".") and not self.config.include_hidden:
            return False
        return Path(name).suffix.lower() in self.config.extensions

    def walk(self) -> list[str]:
        """List document ids (root-relative POSIX paths) in sorted order.

        Raises:
            CorpusRootError: If the root itself cannot be enumerated.
        """
        self._check_root()
        walk_errors: list[ReadError] = []

        def on_error(err: OSError) -> None:
            path = Path(err.filename) if err.filename else self.root
            rel = path.relative_to(self.root).as_posix() if path != self.root else "."
            walk_errors.append(ReadError(rel, f"cannot list directory: {err.strerror or err}"))

        doc_ids = []
        for dirpath, dirnames, filenames in os.walk(self.root, onerror=on_error):
            dirnames[:] = sorted(d for d in dirnames if not self._skip_dir(d))
            rel_dir = Path(dirpath).relative_to(self.root)
            for name in filenames:
                doc_id = (rel_dir / name).as_posix()
                if self._accept_file(name, doc_id):
                    doc_ids.append(doc_id)
                else:
                    logger.debug("Skipping %s", doc_id)

        if any(e.path == "." for e in walk_errors):
            raise CorpusRootError(str(self.root), "cannot list directory")
        for err in walk_errors:
            logger.warning("%s", err)
        self.errors.extend(walk_errors)
        return sorted(doc_ids)

    def read_file(self, doc_id: str) -> Document:
        """Read and normalize one document.

        Raises:
            ReadError: If the file cannot be read or decoded.
        """
        path = self.root / doc_id
        try:
            data = path.read_bytes()
        except OSError as e:
            raise ReadError(doc_id, e.strerror or str(e)) from e
        try:
            text = data.decode(self.config.encoding)
        except UnicodeDecodeError as e:
            raise ReadError(doc_id, f"not valid {self.config.encoding} text ({e.reason} at byte {e.start})") from e

        return build_document(
            doc_id,
            raw_content=text,
            canonical_content=self.normalizer(text),
            size_bytes=len(data),
            metadata={"path": str(path), "encoding": self.config.encoding},
        )

    def _try_read(self, doc_id: str) -> Document | ReadError:
        try:
            return self.read_file(doc_id)
        except ReadError as e:
            return e

    def __iter__(self) -> Iterator[Document]:
        self.errors = []
        for doc_id in self.walk():
            result = self._try_read(doc_id)
            if isinstance(result, ReadError):
                logger.warning("%s", result)
                self.errors.append(result)
                continue
            yield result

    def read_all(self) -> list[Document]:
        """Read every document, in parallel when ``num_workers`` > 1.

        Output order is the sorted walk order regardless of worker count.
        """
        if self.config.num_workers == 1:
            return list(self)

        self.errors = []
        doc_ids = self.walk()
        with ThreadPoolExecutor(max_workers=self.config.num_workers) as pool:
            results = list(pool.map(self._try_read, doc_ids))

        docs = []
        for result in results:
            if isinstance(result, ReadError):
                logger.warning("%s", result)
                self.errors.append(result)
            else:
                docs.append(result)
        return docs
