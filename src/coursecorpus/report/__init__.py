"""Corpus reports."""

from coursecorpus.report.reporter import CorpusReport, build_report
from coursecorpus.report.markdown import render_markdown

__all__ = ["CorpusReport", "build_report", "render_markdown"]
