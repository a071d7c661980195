"""Markdown summary of a corpus report."""

from coursecorpus.report.reporter import CorpusReport


def render_markdown(report: CorpusReport, title: str = "Corpus Report") -> str:
    """Render a human-readable Markdown summary.

    Args:
        report: Report to render
        title: Top-level heading

    Returns:
        Markdown report string
    """
    lines = []

    lines.append(f"# {title}")
    lines.append("")
    if report.root:
        lines.append(f"Root: `{report.root}`")
        lines.append("")

    # Summary
    lines.append("## Summary")
    lines.append("")
    lines.append(f"- **Documents**: {report.total_documents}")
    lines.append(f"- **Clusters**: {report.total_clusters}")
    lines.append(f"- **Duplicates Removed**: {report.duplicates_removed}")
    lines.append(f"- **Unresolved References**: {len(report.unresolved_references)}")
    lines.append(f"- **Ordering Conflicts**: {len(report.ordering_conflicts)}")
    lines.append(f"- **Read Errors**: {len(report.read_errors)}")
    if report.truncated:
        lines.append("- **Truncated**: pair comparison stopped at its deadline")
    lines.append("")

    # Table of contents
    lines.append("## Table of Contents")
    lines.append("")
    lines.append("| # | Title | Module | Document | Copies |")
    lines.append("|---|-------|--------|----------|--------|")
    for entry in report.ordered_entries:
        marker = "" if entry.ordered else " *(unordered)*"
        lines.append(
            f"| {entry.sequence_index} | {entry.title}{marker} | {entry.module_label or ''} | "
            f"`{entry.canonical_id}` | {len(entry.members)} |"
        )
    lines.append("")

    if report.clusters:
        lines.append("## Duplicate Clusters")
        lines.append("")
        _add_clusters(lines, report)

    problems = report.unresolved_references + report.ordering_conflicts + report.read_errors
    if problems or report.stubs:
        lines.append("## Issues")
        lines.append("")
        for err in problems:
            lines.append(f"- {err.kind}: {err}")
        for stub in report.stubs:
            lines.append(f"- possible stub: `{stub}`")
        lines.append("")

    return "\n".join(lines)


def _add_clusters(lines: list[str], report: CorpusReport) -> None:
    """Add one bullet group per multi-member cluster."""
    for cluster in report.clusters:
        lines.append(f"- `{cluster.canonical_id}` (kept)")
        for member in cluster.duplicates:
            score = cluster.similarity_scores.get(member)
            suffix = f" (similarity {score:.3f})" if score is not None else ""
            lines.append(f"  - `{member}`{suffix}")
    lines.append("")
