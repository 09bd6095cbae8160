"""Cross-reference extraction from free-text finding descriptions.

Recognises the identifiers scanners embed in their plugin output:
CVE ids, Bugtraq ids, OSVDB ids, Microsoft bulletins, CERT advisories and
CWE ids. Nessus writes numeric lists such as ``BID : 1234, 5678``; nikto
prefixes lines with ``OSVDB-3092:``.
"""
from __future__ import annotations

import re

# Numeric id lists: "1234" or "1234, 5678"
_ID_LIST = r"(\d+(?:[ \t]*,[ \t]*\d+)*)"

_SINGLE_PATTERNS = {
    "CVE": re.compile(r"\b(CVE-\d{4}-\d{4,})\b"),
    "MSFT": re.compile(r"\b(MS\d{2}-\d{3})\b"),
    "CERT": re.compile(r"\b(CA-\d{4}-\d{2})\b"),
    "CWE": re.compile(r"\b(CWE-\d+)\b"),
}

_LIST_PATTERNS = {
    "BID": re.compile(r"\bBID(?:-|[ \t]*:?[ \t]*)" + _ID_LIST),
    "OSVDB": re.compile(r"\bOSVDB(?:-|[ \t]*:?[ \t]*)" + _ID_LIST),
}

REFERENCE_TYPES = ("CVE", "BID", "OSVDB", "MSFT", "CERT", "CWE")


def extract_references(text: str) -> dict[str, list[str]]:
    """Return every known reference type mapped to the ids found in text.

    Types with no match map to an empty list. Ids keep the order of their
    first appearance and are not repeated.
    """
    refs: dict[str, list[str]] = {}
    for ref_type in REFERENCE_TYPES:
        if ref_type in _SINGLE_PATTERNS:
            found = _SINGLE_PATTERNS[ref_type].findall(text)
        else:
            found = []
            for group in _LIST_PATTERNS[ref_type].findall(text):
                found.extend(part.strip() for part in group.split(","))
        refs[ref_type] = list(dict.fromkeys(found))
    return refs
