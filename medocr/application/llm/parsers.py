from __future__ import annotations

import re

_FENCE_RE = re.compile(r"^```(?:markdown|md)?[ \t]*\n(.*?)\n?```$", re.DOTALL)


def parse_structured_markdown(content: str) -> str:
    """Return the model's markdown, unwrapping a single enclosing code fence if present."""
    text = content.strip()
    m = _FENCE_RE.match(text)
    if m:
        text = m.group(1).strip()
    return text
