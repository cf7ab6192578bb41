"""Address refanging — convert defanged IPs, hostnames and URLs back to normal form."""

from __future__ import annotations

import re

# Patterns that replace the dot in defanged addresses
_DOT_PATTERNS = [
    r"\[\.\]",
    r"\[dot\]",
    r"\(dot\)",
    r"\(\.\)",
]
_DOT_RE = re.compile("|".join(_DOT_PATTERNS), re.IGNORECASE)

# hxxp:// and hxxps:// (also with a bracketed colon, hxxps[:]//)
_SCHEME_RE = re.compile(r"^hxxp(s?)(?:\[:\]|:)//", re.IGNORECASE)


def refang(text: str) -> str:
    """Undo common defanging of an address.

    Handles: [.] [dot] (dot) (.) and hxxp:// / hxxps:// schemes.
    """
    text = _SCHEME_RE.sub(lambda m: f"http{m.group(1).lower()}://", text)
    return _DOT_RE.sub(".", text)
