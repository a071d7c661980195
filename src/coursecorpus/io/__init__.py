"""Corpus input readers."""

from coursecorpus.io.reader import DocumentReader

__all__ = ["DocumentReader"]
