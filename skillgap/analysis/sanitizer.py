"""Reduce raw job-page HTML to a bounded blob that is safe to put in a prompt."""

from __future__ import annotations

import re
from typing import Optional

from skillgap.core.config.pipeline import get_pipeline_int

_BLOCK_TAGS = (
    "script",
    "style",
    "noscript",
    "iframe",
    "object",
    "video",
    "audio",
    "canvas",
    "svg",
    "nav",
    "header",
    "footer",
    "aside",
)

# Openers never look past the next "<" so an unclosed tag costs one short scan.
_OPENER_RE = re.compile(
    rf"<!--|<(?P<tag>{'|'.join(_BLOCK_TAGS)}|embed)\b[^<>]*>",
    re.IGNORECASE,
)
_CLOSER_RES = {tag: re.compile(rf"</{tag}\s*>", re.IGNORECASE) for tag in _BLOCK_TAGS}
_AD_ATTR_RE = re.compile(r'\s(?:class|id)\s*=\s*"([^"<>]*)"', re.IGNORECASE)
_AD_WORD_RE = re.compile(r"\b(?:ad|ads|advert\w*|sponsor\w*)\b", re.IGNORECASE)
_WS_RE = re.compile(r"\s+")
_INTER_TAG_WS_RE = re.compile(r">\s+<")
_UNTERMINATED_RE = re.compile(r"<script|<style|<!--", re.IGNORECASE)

_MAX_PASSES = 4


def _drop_ad_attr(match: re.Match) -> str:
    return "" if _AD_WORD_RE.search(match.group(1)) else match.group(0)


def _strip_once(text: str) -> str:
    """One left-to-right pass; every search resumes where the previous one ended."""
    kept: list[str] = []
    pos = 0
    while True:
        opener = _OPENER_RE.search(text, pos)
        if opener is None:
            kept.append(text[pos:])
            break
        kept.append(text[pos : opener.start()])
        tag = (opener.group("tag") or "").lower()

        if not tag:
            end = text.find("-->", opener.end())
            if end < 0:
                break
            pos = end + 3
        elif tag == "embed" or opener.group(0).endswith("/>"):
            pos = opener.end()
        else:
            closer = _CLOSER_RES[tag].search(text, opener.end())
            if closer is None:
                break
            pos = closer.end()

    return _AD_ATTR_RE.sub(_drop_ad_attr, "".join(kept))


def sanitize_job_html(raw_html: Optional[str], max_chars: Optional[int] = None) -> str:
    """
    Strip non-content blocks, comments and ad markers from job HTML, collapse
    whitespace and cap the length. Never raises; runs in time linear in the input.
    """
    if not raw_html:
        return ""
    limit = max_chars if max_chars is not None else get_pipeline_int("sanitizer.max_chars", 35000)
    if limit <= 0:
        return ""

    text = raw_html
    for _ in range(_MAX_PASSES):
        stripped = _strip_once(text)
        if stripped == text:
            break
        text = stripped

    text = _WS_RE.sub(" ", text)
    text = _INTER_TAG_WS_RE.sub("><", text).strip()

    # Whatever opener is left has no closer; drop it and everything after.
    leftover = _UNTERMINATED_RE.search(text)
    if leftover:
        text = text[: leftover.start()].rstrip()

    return text[:limit]
