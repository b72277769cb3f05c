"""
Numeric prefix patterns for document names and Markdown headings.

Both functions are idempotent: the prefix regexes consume every leading
numeric group, so a second pass finds nothing left to strip.
"""

import re

__all__ = [
    "HEADING_PREFIX_RE",
    "NAME_PREFIX_RE",
    "strip_heading_prefixes",
    "strip_name_prefix",
]

# "40 littlefs", "01. intro", "3.2 setup"
NAME_PREFIX_RE = re.compile(r"^(?:\d+\.?\s*)+")

# "## 36.1 初始化", "### 2. Usage"; group 1 is the heading marker
HEADING_PREFIX_RE = re.compile(r"^(#{1,6}[ \t]+)(?:\d+(?:\.\d+)*\.?[ \t]*)+")

# Opening/closing code fence: up to 3 spaces, then ``` or ~~~ (or longer)
_FENCE_RE = re.compile(r"^ {0,3}(`{3,}|~{3,})")

_BOM = "\ufeff"


def strip_name_prefix(name: str, extension: str) -> str:
    """Return the document name without its numeric prefix.

    Names that don't end with the extension, carry no prefix, or would
    be left with an empty stem are returned unchanged.

    >>> strip_name_prefix("40 littlefs.md", ".md")
    'littlefs.md'
    >>> strip_name_prefix("2024.md", ".md")
    '2024.md'
    """
    if not name.endswith(extension):
        return name

    stem = name[: len(name) - len(extension)]
    new_stem = NAME_PREFIX_RE.sub("", stem, count=1)
    if not new_stem or new_stem == stem:
        return name
    return new_stem + extension


def _strip_heading(line: str) -> str | None:
    """Stripped heading, or None when the line is left as is."""
    match = HEADING_PREFIX_RE.match(line)
    if not match:
        return None
    rest = line[match.end():]
    if not rest.strip():
        # "## 3" alone: keep the number rather than leave an empty heading
        return None
    return match.group(1) + rest


def strip_heading_prefixes(text: str) -> tuple[str, int]:
    """Remove numeric prefixes from every Markdown heading in text.

    Lines inside fenced code blocks are not headings and are skipped.
    Line endings (including CRLF) and a leading BOM are preserved.

    Returns:
        (new_text, number_of_headings_changed)
    """
    bom = text.startswith(_BOM)
    body = text[1:] if bom else text

    lines = body.split("\n")
    changed = 0
    fence: str | None = None

    for i, line in enumerate(lines):
        fence_match = _FENCE_RE.match(line)
        if fence is None:
            if fence_match:
                fence = fence_match.group(1)
                continue
        else:
            marker = fence_match.group(1) if fence_match else ""
            if (
                marker
                and marker[0] == fence[0]
                and len(marker) >= len(fence)
                and not line[fence_match.end():].strip()
            ):
                fence = None
            continue

        stripped = _strip_heading(line)
        if stripped is not None:
            lines[i] = stripped
            changed += 1

    new_body = "\n".join(lines)
    return (_BOM + new_body if bom else new_body), changed
