from __future__ import annotations

import re
import unicodedata
from typing import Callable

MAX_LABEL_LENGTH = 63
MAX_NAME_LENGTH = 253

LabelCodec = Callable[[str], str]

_DISALLOWED_RE = re.compile(r"[\s\x00-\x1f\x7f.]")

# IDNA treats these as label separators too; each maps to a single ".".
_DOT_EQUIVALENTS = str.maketrans({"\u3002": ".", "\uff0e": ".", "\uff61": "."})


def idna_to_ascii(label: str) -> str:
    """Canonicalise a lower-cased label to its ASCII (punycode) form."""
    if label.isascii():
        return label
    return label.encode("idna").decode("ascii")


def idna_to_unicode(label: str) -> str:
    """Canonicalise a lower-cased label to NFC Unicode, decoding punycode."""
    if label.startswith("xn--"):
        return label.encode("ascii").decode("idna")
    return unicodedata.normalize("NFC", label)


def canonical_label(label: str, codec: LabelCodec) -> str:
    # UnicodeError is left for the caller to report with its own context.
    return codec(label.lower())


def label_problem(label: str) -> str | None:
    if not label:
        return "empty label"
    if len(label) > MAX_LABEL_LENGTH:
        return f"label longer than {MAX_LABEL_LENGTH} characters"
    bad = _DISALLOWED_RE.search(label)
    if bad:
        return f"disallowed character {bad.group()!r} in label"
    return None


def unify_dots(text: str) -> str:
    """Replace IDNA dot-equivalent separators with ".", keeping offsets."""
    return text.translate(_DOT_EQUIVALENTS)
