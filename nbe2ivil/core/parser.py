"""NBE record parsing and normalization into Finding objects."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable

from .models import Finding
from .references import extract_references

logger = logging.getLogger(__name__)

SEVERITY_MAP = MappingProxyType({
    "Security Hole": 1,
    "Security Warning": 2,
    "Security Note": 3,
    "Open port": 4,
})

_RECORD_FIELDS = 7
_RESULTS_RECORD = "results"
_DEFAULT_ID = "portscan"

_NUMERIC_PORT_RE = re.compile(r"[0-9]+")
_PORT_RE = re.compile(r"([0-9]+|general)/(tcp|udp|icmp)")
_NIKTO_PATH_RE = re.compile(r"(/[\w/-]+):")


@dataclass
class ParseResult:
    """Findings extracted from an NBE stream, plus line counts."""
    findings: list[Finding] = field(default_factory=list)
    lines_read: int = 0
    results_lines: int = 0

    @property
    def ignored_lines(self) -> int:
        return self.lines_read - self.results_lines


def split_record(line: str) -> list[str]:
    """Split one NBE line into its seven fields.

    The last field keeps any further ``|`` characters. Short lines are
    padded with empty strings.
    """
    fields = line.rstrip("\r\n").split("|", _RECORD_FIELDS - 1)
    fields.extend([""] * (_RECORD_FIELDS - len(fields)))
    return fields


def normalize_port(raw: str) -> str:
    port = raw
    if _NUMERIC_PORT_RE.fullmatch(port):
        port += "/tcp"
    match = _PORT_RE.search(port)
    if match:
        return match.group(0)
    return port


def severity_for(label: str) -> int:
    return SEVERITY_MAP.get(label, 0)


def normalize_text(raw: str) -> str:
    """Turn literal backslash escapes into real newlines."""
    text = re.sub(r"\\r(\\n)?", "\n", raw)
    return text.replace("\\n", "\n")


def nikto_path(text: str) -> str | None:
    match = _NIKTO_PATH_RE.search(text)
    return match.group(1) if match else None


def parse_line(line: str, scanner: str) -> Finding | None:
    """Build a Finding from one NBE line, or None for non-results records."""
    record_type, _network, ip, raw_port, plugin_id, label, raw_text = split_record(line)
    if record_type != _RESULTS_RECORD:
        return None

    port = normalize_port(raw_port)
    plugin_id = plugin_id or _DEFAULT_ID
    text = normalize_text(raw_text)

    if scanner.lower() == "nikto":
        path = nikto_path(text)
        if path:
            plugin_id = f"{plugin_id} {path}"

    if not text:
        text = f"Port {port} is open"

    references = {
        ref_type.lower(): ids
        for ref_type, ids in extract_references(text).items()
        if ids
    }

    return Finding(
        ip=ip,
        port=port,
        id=plugin_id,
        severity=severity_for(label),
        finding=text,
        references=references,
    )


def parse_lines(lines: Iterable[str], scanner: str) -> ParseResult:
    """Parse an NBE stream into an ordered list of findings."""
    result = ParseResult()
    for lineno, line in enumerate(lines, start=1):
        result.lines_read += 1
        finding = parse_line(line, scanner)
        if finding is None:
            logger.debug("line %d: not a results record, skipped", lineno)
            continue
        result.results_lines += 1
        logger.debug("line %d: %s %s id=%s severity=%d",
                     lineno, finding.ip, finding.port, finding.id, finding.severity)
        result.findings.append(finding)
    return result
