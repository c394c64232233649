"""Whitespace normalisation for titles and comment bodies."""
from __future__ import annotations

import re
from typing import Optional

_LINE_BREAKS = re.compile(r"[\r\n]+")
_WHITESPACE = re.compile(r"\s+")


def normalize(text: Optional[str]) -> str:
    """Collapse line breaks and inner whitespace, dropping blank lines.

    >>> normalize("Hello   world\\n\\n\\nThis   is   a   test\\r\\n")
    'Hello world\\nThis is a test'
    """
    if not text:
        return ""
    lines = (_WHITESPACE.sub(" ", line).strip() for line in _LINE_BREAKS.sub("\n", text).split("\n"))
    return "\n".join(line for line in lines if line)
