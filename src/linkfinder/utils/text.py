"""Text helpers for word tokenization."""

from __future__ import annotations

import re
from typing import List

_SEPARATOR_RE = re.compile(r"[^a-zA-Zа-яёА-ЯЁ0-9]+")


def tokenize(text: str) -> List[str]:
    """Split text into lowercase word tokens.

    Anything that is not a Latin or Cyrillic letter or a digit separates
    words, so hyphens and punctuation never end up inside a token.
    """
    return [token for token in _SEPARATOR_RE.split(text.lower()) if token]
