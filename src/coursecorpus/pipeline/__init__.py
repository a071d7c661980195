"""End-to-end corpus loading."""

from coursecorpus.pipeline.loader import load_corpus, load_ordering_sources

__all__ = ["load_corpus", "load_ordering_sources"]
