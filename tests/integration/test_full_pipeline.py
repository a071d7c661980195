"""Integration tests for the full corpus load: read -> dedup -> index -> report."""

import json

import pytest
import yaml
from click.testing import CliRunner
from coursecorpus.cli import main
from coursecorpus.config.schema import LoaderConfig
from coursecorpus.errors import CorpusRootError
from coursecorpus.index.references import OrderingSource
from coursecorpus.logging.run_logger import RunLogger
from coursecorpus.pipeline.loader import load_corpus


def _paragraphs(prefix, count=10, words=20):
    return "\n\n".join(
        " ".join(f"{prefix}{p}w{w}" for w in range(words)) for p in range(count)
    )


TESTING_LESSON = """# Testing React Components

Shallow rendering lets you render a component one level deep.

![enzyme](https://cdn-{cdn}.example.com/enzyme.png)

```javascript
import {{ shallow }} from 'enzyme';
const wrapper = shallow(<Foo />);
```
"""

AJAX_BASE = "# AJAX with React\n\n" + _paragraphs("ajax")
AJAX_EXTENDED = AJAX_BASE + "\n\n" + _paragraphs("fetch", count=1)

SUMMARY = """# Summary

## Git
* [Intro to Git](git/intro.md)
* [Branching](git/branching.md)

## React
* [Testing React Components](react/testing-react-components.md)
* [AJAX with React](ajax/ajax-with-react.md)
* [Missing Lesson](react/missing.md)
"""


def _write(root, rel, content):
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(content, bytes):
        path.write_bytes(content)
    else:
        path.write_text(content, encoding="utf-8")


@pytest.fixture
def course(tmp_path):
    """A small course tree with duplicated lessons, a stub, and noise."""
    root = tmp_path / "course"
    _write(root, "SUMMARY.md", SUMMARY)
    _write(root, "git/intro.md", "# Intro to Git\n\nRun `git init` to create a repository.\n")
    _write(root, "git/branching.md", "# Branching\n\nUse `git checkout -b feature` to branch.\n")
    _write(root, "react/testing-react-components.md", TESTING_LESSON.format(cdn="a"))
    _write(root, "react-copy/testing-react-components.md", TESTING_LESSON.format(cdn="mirror"))
    _write(root, "ajax/ajax-with-react.md", AJAX_BASE)
    _write(root, "ajax-v2/ajax-with-react.md", AJAX_EXTENDED)
    _write(root, "stubs/empty.md", "")
    _write(root, "misc/notes.md", "# Notes\n\nInstallfest checklist for Node and Python.\n")
    _write(root, "assets/logo.png", b"\x89PNG\r\n\x1a\n")
    _write(root, "bad/latin1.md", "# Caf\xe9\n".encode("latin-1"))
    return root


class TestFullPipeline:
    """End-to-end corpus load scenarios."""

    def test_load_counts(self, course):
        report = load_corpus(course)
        assert report.total_documents == 8
        assert report.total_clusters == 6
        assert report.duplicates_removed == 2
        assert [e.path for e in report.read_errors] == ["bad/latin1.md"]
        assert report.stubs == ["stubs/empty.md"]
        assert not report.truncated
        assert len(report.config_hash) == 16
        assert set(report.timings) == {"read", "detect", "index"}

    def test_ordered_entries(self, course):
        report = load_corpus(course)
        entries = report.ordered_entries
        assert [e.canonical_id for e in entries] == [
            "git/intro.md",
            "git/branching.md",
            "react-copy/testing-react-components.md",
            "ajax-v2/ajax-with-react.md",
            "misc/notes.md",
            "stubs/empty.md",
        ]
        assert [e.sequence_index for e in entries] == list(range(6))
        assert [e.ordered for e in entries] == [True, True, True, True, False, False]
        assert report.unordered == ["misc/notes.md", "stubs/empty.md"]
        assert entries[0].module_label == "Git"
        assert entries[2].module_label == "React"
        assert entries[4].module_label == "misc"
        assert entries[3].title == "AJAX with React"

    def test_unresolved_reference(self, course):
        report = load_corpus(course)
        assert len(report.unresolved_references) == 1
        assert report.unresolved_references[0].path == "react/missing.md"
        assert "react/missing.md" not in [e.canonical_id for e in report.ordered_entries]

    def test_near_duplicate_longer_canonical(self, course):
        report = load_corpus(course)
        cluster = next(c for c in report.clusters if "ajax/ajax-with-react.md" in c.members)
        assert cluster.canonical_id == "ajax-v2/ajax-with-react.md"
        assert 0.85 <= cluster.similarity_scores["ajax/ajax-with-react.md"] < 1.0

    def test_index_file_not_a_document(self, course):
        report = load_corpus(course)
        ids = [m for e in report.ordered_entries for m in e.members]
        assert "SUMMARY.md" not in ids
        assert "assets/logo.png" not in ids

    def test_deterministic(self, course):
        first = load_corpus(course)
        second = load_corpus(course)
        assert [e.to_dict() for e in first.ordered_entries] == [e.to_dict() for e in second.ordered_entries]
        assert [c.to_dict() for c in first.clusters] == [c.to_dict() for c in second.clusters]

    def test_parallel_workers_same_result(self, course):
        config = LoaderConfig.from_dict({"reader": {"num_workers": 4}, "dedup": {"num_workers": 4}})
        assert [e.to_dict() for e in load_corpus(course, config).ordered_entries] == [
            e.to_dict() for e in load_corpus(course).ordered_entries
        ]

    def test_exact_duplicate_pair(self, tmp_path):
        root = tmp_path / "pair"
        _write(root, "week1/testing-react-components.md", TESTING_LESSON.format(cdn="a"))
        _write(root, "week5/testing-react-components.md", TESTING_LESSON.format(cdn="b") + "\n\n")
        _write(root, "week2/closures.md", "# Closures\n\nFunctions remember their scope.\n")
        report = load_corpus(root)
        assert report.duplicates_removed == 1
        assert len(report.ordered_entries) == 2
        entry = next(e for e in report.ordered_entries if len(e.members) == 2)
        assert entry.canonical_id == "week5/testing-react-components.md"

    def test_empty_document_stub(self, tmp_path):
        root = tmp_path / "stub"
        _write(root, "lessons/empty.md", "")
        _write(root, "lessons/real.md", "# Real lesson\n")
        report = load_corpus(root)
        assert report.stubs == ["lessons/empty.md"]
        stub = next(e for e in report.ordered_entries if e.canonical_id == "lessons/empty.md")
        assert stub.members == ("lessons/empty.md",)

    def test_conflicting_index_files(self, tmp_path):
        root = tmp_path / "conflict"
        _write(root, "git/intro.md", "# Intro to Git\n\ngit init\n")
        _write(root, "git/branching.md", "# Branching\n\ngit branch\n")
        _write(root, "react/testing.md", "# Testing React Components\n\nshallow render\n")
        _write(root, "SUMMARY.md", "* [Intro to Git](git/intro.md)\n")
        _write(root, "ORDER.md", "1. [Branching](git/branching.md)\n2. [Testing](react/testing.md)\n3. Intro to Git\n")

        report = load_corpus(root, index_files=["SUMMARY.md", "ORDER.md"])
        assert len(report.ordering_conflicts) == 1
        conflict = report.ordering_conflicts[0]
        assert (conflict.previous_source, conflict.previous_position) == ("SUMMARY.md", 1)
        assert (conflict.winning_source, conflict.winning_position) == ("ORDER.md", 3)
        assert [e.canonical_id for e in report.ordered_entries] == [
            "git/branching.md", "react/testing.md", "git/intro.md",
        ]
        assert report.ordered_entries[2].declared_position == 3
        assert report.total_documents == 3

    def test_explicit_missing_index_file_reported(self, course):
        report = load_corpus(course, index_files=["NOPE.md"])
        assert "NOPE.md" in [e.path for e in report.read_errors]
        assert all(not e.ordered for e in report.ordered_entries)

    def test_configured_missing_index_file_reported(self, course):
        config = LoaderConfig.from_dict({"index": {"index_files": ["SUMMARY.md", "ORDER.md"]}})
        report = load_corpus(course, config)
        assert [e.path for e in report.read_errors] == ["bad/latin1.md", "ORDER.md"]
        assert report.ordered_entries[0].canonical_id == "git/intro.md"

    def test_default_index_file_may_be_absent(self, tmp_path):
        root = tmp_path / "plain"
        _write(root, "git/intro.md", "# Intro to Git\n")
        report = load_corpus(root)
        assert report.read_errors == []

    def test_programmatic_sources(self, course):
        config = LoaderConfig.from_dict({"index": {"index_files": []}})
        source = OrderingSource.from_entries("api", ["misc/notes.md"])
        report = load_corpus(course, config, sources=[source])
        assert report.ordered_entries[0].canonical_id == "misc/notes.md"
        assert report.ordered_entries[0].source == "api"

    def test_deadline_truncates(self, course):
        report = load_corpus(course, deadline=0.0)
        assert report.truncated
        ajax = [e for e in report.ordered_entries if "ajax" in e.canonical_id]
        assert len(ajax) == 2

    def test_missing_root_is_fatal(self, tmp_path):
        with pytest.raises(CorpusRootError):
            load_corpus(tmp_path / "does-not-exist")

    def test_run_logger(self, course, tmp_path):
        run_logger = RunLogger(run_dir=tmp_path / "run")
        load_corpus(course, run_logger=run_logger)
        events = run_logger.read_events()
        kinds = [e["event"] for e in events]
        assert kinds[0] == "config"
        assert kinds.count("stage") == 3
        assert kinds[-1] == "report"
        assert any(e["event"] == "error" and e.get("kind") == "unresolved_reference" for e in events)


class TestCli:
    def test_load_json(self, course, tmp_path):
        out = tmp_path / "report.json"
        result = CliRunner().invoke(main, ["load", str(course), "--output", str(out)])
        assert result.exit_code == 0, result.output
        data = json.loads(out.read_text())
        assert data["total_documents"] == 8
        assert data["duplicates_removed"] == 2
        assert data["ordered_entries"][0]["canonical_id"] == "git/intro.md"

    def test_load_yaml_with_threshold(self, course, tmp_path):
        out = tmp_path / "report.yaml"
        result = CliRunner().invoke(main, ["load", str(course), "-t", "0.99", "-f", "yaml", "-o", str(out)])
        assert result.exit_code == 0, result.output
        data = yaml.safe_load(out.read_text())
        # The AJAX pair no longer clusters at 0.99
        assert data["duplicates_removed"] == 1

    def test_load_markdown(self, course, tmp_path):
        out = tmp_path / "report.md"
        result = CliRunner().invoke(main, ["load", str(course), "--format", "markdown", "-o", str(out)])
        assert result.exit_code == 0, result.output
        assert "## Table of Contents" in out.read_text()

    def test_duplicates(self, course):
        result = CliRunner().invoke(main, ["duplicates", str(course)])
        assert result.exit_code == 0, result.output
        assert "ajax-v2/ajax-with-react.md (kept)" in result.output
        assert "2 duplicate(s) across 2 cluster(s)" in result.output

    def test_config(self):
        result = CliRunner().invoke(main, ["config"])
        assert result.exit_code == 0
        assert yaml.safe_load(result.output)["dedup"]["threshold"] == 0.85

    def test_missing_root(self, tmp_path):
        result = CliRunner().invoke(main, ["load", str(tmp_path / "missing")])
        assert result.exit_code != 0

    def test_bad_config(self, course, tmp_path):
        cfg = tmp_path / "bad.yaml"
        cfg.write_text("dedup:\n  method: cosine\n")
        result = CliRunner().invoke(main, ["load", str(course), "--config", str(cfg)])
        assert result.exit_code != 0
