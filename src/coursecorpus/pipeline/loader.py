"""Corpus load - the end-to-end pipeline.

Reader -> Normalizer -> Duplicate Detector -> Corpus Indexer -> Reporter,
each stage consuming the previous stage's complete output.
"""

import logging
from collections.abc import Sequence
from pathlib import Path

from coursecorpus.config.hash import compute_config_hash
from coursecorpus.config.schema import IndexConfig, LoaderConfig
from coursecorpus.errors import ReadError
from coursecorpus.index import CorpusIndexer, OrderingSource, build_module_labels, load_index_file
from coursecorpus.io.reader import DocumentReader
from coursecorpus.logging.run_logger import RunLogger
from coursecorpus.operators.dedup.detector import DuplicateDetector
from coursecorpus.operators.normalize import Normalizer
from coursecorpus.profiling import Profiler
from coursecorpus.report.reporter import CorpusReport, build_report

logger = logging.getLogger(__name__)


def _relative_id(path: Path, root: Path) -> str | None:
    try:
        return path.resolve().relative_to(root.resolve()).as_posix()
    except ValueError:
        return None


def load_ordering_sources(
    root: Path,
    index_files: Sequence[str | Path],
    required: bool,
    encoding: str = "utf-8",
) -> tuple[list[OrderingSource], list[ReadError]]:
    """Parse index files into ordering sources, in the given order.

    Missing files are reported as ReadErrors when ``required``; otherwise
    they are skipped quietly.
    """
    sources: list[OrderingSource] = []
    errors: list[ReadError] = []
    for index_file in index_files:
        path = Path(index_file)
        if not path.is_absolute():
            path = root / path
        if not path.is_file():
            if required:
                err = ReadError(str(index_file), "index file not found")
                logger.warning("%s", err)
                errors.append(err)
            else:
                logger.debug("No index file at %s", path)
            continue
        try:
            sources.append(load_index_file(path, root, encoding=encoding))
        except (OSError, UnicodeDecodeError) as e:
            err = ReadError(str(index_file), f"cannot read index file: {e}")
            logger.warning("%s", err)
            errors.append(err)
    return sources, errors


def load_corpus(
    root: str | Path,
    config: LoaderConfig | None = None,
    index_files: Sequence[str | Path] | None = None,
    sources: Sequence[OrderingSource] = (),
    deadline: float | None = None,
    run_logger: RunLogger | None = None,
) -> CorpusReport:
    """Load, deduplicate and order a lesson corpus.

    Args:
        root: Corpus root directory
        config: Loader configuration (defaults if None)
        index_files: Index documents declaring lesson order, relative to
            root or absolute. Defaults to ``config.index.index_files``.
            Missing files are reported unless they are the built-in
            default (``SUMMARY.md``).
        sources: Already-parsed ordering sources, processed after the
            index files
        deadline: Optional ``time.monotonic()`` value after which pair
            comparison stops early
        run_logger: Optional structured event log

    Returns:
        CorpusReport describing the ordered, deduplicated corpus

    Raises:
        CorpusRootError: If the root directory cannot be enumerated.
    """
    root = Path(root)
    config = config or LoaderConfig()
    config_hash = compute_config_hash(config)
    profiler = Profiler()

    if run_logger:
        run_logger.log_config(config.to_dict())

    # Only the built-in default index files may be absent without error
    required = index_files is not None or list(config.index.index_files) != IndexConfig().index_files
    index_list = list(index_files) if index_files is not None else list(config.index.index_files)
    exclude = {rel for rel in (_relative_id(root / Path(p), root) for p in index_list) if rel}

    logger.info("Loading corpus from %s (config %s)", root, config_hash)

    with profiler.section("read"):
        reader = DocumentReader(
            root,
            config=config.reader,
            normalizer=Normalizer(config.normalizer),
            exclude_paths=exclude,
        )
        documents = reader.read_all()
        read_errors = list(reader.errors)

    with profiler.section("detect"):
        detector = DuplicateDetector(config.dedup)
        detection = detector.detect(documents, deadline=deadline)

    with profiler.section("index"):
        declared, index_errors = load_ordering_sources(
            root, index_list, required=required, encoding=config.reader.encoding,
        )
        read_errors.extend(index_errors)
        labels = build_module_labels(documents, config.index.module_labels)
        indexer = CorpusIndexer(title_match=config.index.title_match)
        index = indexer.index(
            detection.clusters,
            {doc.id: doc for doc in documents},
            sources=[*declared, *sources],
            module_labels=labels,
        )

    timings = profiler.timings()
    report = build_report(
        documents,
        detection,
        index,
        read_errors=read_errors,
        root=str(root),
        config_hash=config_hash,
        timings=timings,
    )

    if run_logger:
        run_logger.log_stage("read", timings["read"], documents=len(documents), read_errors=len(read_errors))
        run_logger.log_stage("detect", timings["detect"], clusters=len(detection.clusters), **{
            k: v for k, v in detection.stats.to_dict().items() if k != "documents"
        })
        run_logger.log_stage("index", timings["index"], entries=len(index.entries))
        for err in [*read_errors, *index.unresolved, *index.conflicts]:
            run_logger.log_error(err)
        run_logger.log_metric("duplicates_removed", report.duplicates_removed)
        run_logger.log("report", {
            "total_documents": report.total_documents,
            "total_clusters": report.total_clusters,
            "truncated": report.truncated,
        })

    logger.info(
        "Loaded %d documents into %d entries (%d duplicates removed)",
        report.total_documents, len(report.ordered_entries), report.duplicates_removed,
    )
    return report
