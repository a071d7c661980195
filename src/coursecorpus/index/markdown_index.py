"""Markdown index adapter.

Parses Gitbook-style ``SUMMARY.md`` files into ordering sources::

    # Summary

    ## Git and GitHub
    * [Intro to Git](git/intro.md)
        * [Branching](git/branching.md)

    ## JavaScript
    1. [Closures](js/closures.md)
    2. Callbacks

Bulleted and numbered items both count, nesting is flattened in reading
order, ``##`` and deeper headings label the items below them, and links to
external URLs are ignored.
"""

import logging
import posixpath
import re
from pathlib import Path
from urllib.parse import unquote

from coursecorpus.index.references import OrderingReference, OrderingSource

logger = logging.getLogger(__name__)

_HEADING = re.compile(r"^\s{0,3}(#{1,6})\s+(.+?)\s*#*\s*$")
# Target: <angle-bracketed, may hold spaces> or text with balanced parentheses
_LINK_ITEM = re.compile(
    r"^\s*(?:[*+-]|\d+[.)])\s+\[(?P<title>[^\]]*)\]"
    r"\((?P<target><[^>]*>[^)]*|(?:[^()]|\([^()]*\))*)\)"
)
_PLAIN_ITEM = re.compile(r"^\s*(?:[*+-]|\d+[.)])\s+(?P<title>[^\[\s].*?)\s*$")
_EXTERNAL = re.compile(r"^(?:[a-zA-Z][a-zA-Z0-9+.-]*:|//)")
_FENCE = re.compile(r"^\s{0,3}(```|~~~)")


def normalize_reference_path(target: str, base_dir: str = "") -> str | None:
    """Turn a link target into a root-relative POSIX path.

    Returns None for external links and anchor-only targets.
    """
    target = target.strip()
    if not target:
        return None
    # Drop an optional "title": (<path with spaces> "Title") or (path "Title")
    if target.startswith("<") and ">" in target:
        target = target[1 : target.index(">")].strip()
    else:
        target = target.split()[0]
    if _EXTERNAL.match(target):
        return None

    target = unquote(target.split("#", 1)[0].split("?", 1)[0])
    if not target:
        return None
    if target.endswith("/"):
        target += "README.md"

    if target.startswith("/"):
        joined = target.lstrip("/")
    else:
        joined = posixpath.join(base_dir, target) if base_dir else target
    return posixpath.normpath(joined)


def parse_index(text: str, name: str, base_dir: str = "") -> OrderingSource:
    """Parse Markdown index text into an ordering source.

    Args:
        text: Index document content.
        name: Source name used in conflict and error reports.
        base_dir: Root-relative directory of the index file, used to resolve
            relative link targets.
    """
    refs: list[OrderingReference] = []
    module_label: str | None = None
    in_fence = False

    for line in text.splitlines():
        if _FENCE.match(line):
            in_fence = not in_fence
            continue
        if in_fence:
            continue

        heading = _HEADING.match(line)
        if heading:
            level = len(heading.group(1))
            module_label = heading.group(2).strip() if level >= 2 else None
            continue

        link = _LINK_ITEM.match(line)
        if link:
            title = link.group("title").strip() or None
            raw_target = link.group("target")
            path = normalize_reference_path(raw_target, base_dir)
            if path is None and raw_target.strip() and not raw_target.strip().startswith("#"):
                logger.debug("%s: ignoring external link %s", name, raw_target.strip())
                continue
            refs.append(OrderingReference(
                position=len(refs) + 1, title=title, path=path, module_label=module_label,
            ))
            continue

        plain = _PLAIN_ITEM.match(line)
        if plain and not set(plain.group("title")) <= set("-*_ "):
            refs.append(OrderingReference(
                position=len(refs) + 1, title=plain.group("title"), module_label=module_label,
            ))

    return OrderingSource(name=name, references=tuple(refs))


def load_index_file(path: str | Path, root: str | Path, encoding: str = "utf-8") -> OrderingSource:
    """Read and parse an index file located inside or outside the corpus root."""
    path = Path(path)
    root = Path(root)
    if not path.is_absolute():
        path = root / path
    try:
        rel = path.resolve().relative_to(root.resolve())
        name = rel.as_posix()
        base_dir = "" if rel.parent == Path(".") else rel.parent.as_posix()
    except ValueError:
        # Outside the root: link targets are taken as root-relative
        name = str(path)
        base_dir = ""

    source = parse_index(path.read_text(encoding=encoding), name=name, base_dir=base_dir)
    logger.info("Loaded %d ordering references from %s", len(source), name)
    return source
