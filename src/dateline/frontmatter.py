"""Markdown frontmatter reader.

Reads the YAML block delimited by ``---`` lines at the very start of a
document. Timestamps are NOT converted by YAML: ``date: 2024-09-09`` stays
the string ``"2024-09-09"`` so every date value goes through
``parse_date_string()`` and keeps the offset the author wrote.

Usage:
    doc = read_document(Path("content/notes/hello.md"), cwd=Path("."))
    print(doc.frontmatter)
"""

from __future__ import annotations

import re
import warnings
from pathlib import Path
from typing import Any

import yaml

from dateline.dates.models import Document

# Opening fence, YAML body, closing fence, each fence on its own line.
_FRONTMATTER_RE = re.compile(
    r"\A---[ \t]*\r?\n(.*?)(?:\r?\n)?^---[ \t]*(?:\r?\n|\Z)",
    re.DOTALL | re.MULTILINE,
)


class FrontmatterError(ValueError):
    """Raised when a frontmatter block is not valid YAML."""


class _StringDateLoader(yaml.SafeLoader):
    """SafeLoader that leaves timestamp-looking scalars as strings."""


_StringDateLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != "tag:yaml.org,2002:timestamp"]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def split_frontmatter(text: str, path: str = "") -> tuple[dict[str, Any] | None, str]:
    """Split *text* into its frontmatter mapping and the remaining body.

    Args:
        text: Full document text.
        path: File path, used in warnings and error messages only.

    Returns:
        ``(frontmatter, body)``; frontmatter is None when the document has no
        block or the block is not a mapping.

    Raises:
        FrontmatterError: if the block is not valid YAML.
    """
    match = _FRONTMATTER_RE.match(text)
    if not match:
        return None, text

    body = text[match.end():]
    try:
        data = yaml.load(match.group(1), Loader=_StringDateLoader)
    except yaml.YAMLError as exc:
        raise FrontmatterError(f"Invalid YAML frontmatter in '{path}': {exc}") from None

    if data is None:
        return {}, body
    if not isinstance(data, dict):
        warnings.warn(
            f"Frontmatter in '{path}' is a {type(data).__name__}, not a mapping, ignored.",
            UserWarning,
            stacklevel=2,
        )
        return None, body
    return data, body


def read_document(path: Path, cwd: Path | None = None) -> Document:
    """Read *path* (relative to *cwd* if not absolute) into a Document.

    Raises:
        OSError: if the file cannot be read.
        FrontmatterError: if its frontmatter is not valid YAML.
    """
    doc = Document(path=path, cwd=cwd if cwd is not None else Path.cwd())
    text = doc.full_path.read_text(encoding="utf-8")
    doc.frontmatter, _ = split_frontmatter(text, str(path))
    return doc
