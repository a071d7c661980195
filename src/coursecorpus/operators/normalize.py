"""Canonical comparison form for lesson documents.

The canonical form is never shown to readers. It removes formatting noise
that differs between copies of the same lesson while keeping code block
content, which is a strong duplicate signal.
"""

import re

from coursecorpus.config.schema import NormalizerConfig

_FENCE = re.compile(r"^(`{3,}|~{3,})")
_INLINE_LINK = re.compile(
    r"(!?\[[^\]]*\])"  # [text] or ![alt]
    r"\(\s*<?[^)\s>]*>?"  # (target
    r"(?:\s+(?:\"[^\"]*\"|'[^']*'|\([^)]*\)))?"  # optional "title"
    r"\s*\)"
)
_REFERENCE_DEF = re.compile(r"^(\[[^\]]+\]):\s*\S+.*$")
_AUTOLINK = re.compile(r"<(?:https?|ftp|mailto):[^>\s]+>", re.IGNORECASE)
_BARE_URL = re.compile(r"\b(?:https?|ftp)://[^\s)\]>\"']+", re.IGNORECASE)

_STRONG = re.compile(r"(\*\*|__|~~)(?=\S)(.+?)(?<=\S)\1")
_EM_STAR = re.compile(r"(?<![\w*])\*(?=\S)(.+?)(?<=\S)\*(?![\w*])")
_EM_UNDERSCORE = re.compile(r"(?<![\w_])_(?=\S)(.+?)(?<=\S)_(?![\w_])")


def _normalize_prose(line: str, placeholder: str) -> str:
    line = _INLINE_LINK.sub(lambda m: f"{m.group(1)}({placeholder})", line)
    line = _REFERENCE_DEF.sub(lambda m: f"{m.group(1)}: {placeholder}", line)
    line = _AUTOLINK.sub(placeholder, line)
    line = _BARE_URL.sub(placeholder, line)
    line = _STRONG.sub(r"\2", line)
    line = _EM_STAR.sub(r"\1", line)
    line = _EM_UNDERSCORE.sub(r"\1", line)
    return line


def normalize(raw_content: str, config: NormalizerConfig | None = None) -> str:
    """Return the canonical comparison form of a document.

    Deterministic and pure: the same input always yields the same output.
    Empty output means the document has no comparable content.
    """
    config = config or NormalizerConfig()
    text = raw_content.lstrip("\ufeff").replace("\r\n", "\n").replace("\r", "\n")

    out: list[str] = []
    fence: str | None = None
    for raw_line in text.split("\n"):
        line = raw_line.strip()

        match = _FENCE.match(line)
        if match:
            marker = match.group(1)
            if fence is None:
                # Opening fence: keep the marker, drop the language tag
                fence = marker
                out.append(marker[0] * 3)
                continue
            if marker[0] == fence[0] and len(marker) >= len(fence) and line == marker:
                fence = None
                out.append(marker[0] * 3)
                continue

        if fence is not None:
            out.append(line)
        else:
            out.append(_normalize_prose(line, config.link_placeholder).strip())

    if config.collapse_blank_lines:
        collapsed: list[str] = []
        for line in out:
            if not line and (not collapsed or not collapsed[-1]):
                continue
            collapsed.append(line)
        out = collapsed

    result = "\n".join(out).strip()
    if config.lowercase:
        result = result.lower()
    return result


class Normalizer:
    """Callable normalizer bound to a configuration."""

    def __init__(self, config: NormalizerConfig | None = None):
        self.config = config or NormalizerConfig()

    def __call__(self, raw_content: str) -> str:
        return normalize(raw_content, self.config)
