"""IVIL XML emission.

Each function returns a text fragment; the caller writes them in document
order: header, open, addressee (optional), sender, findings, close.
"""
from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from typing import Iterable

from ..core.models import Finding

IVIL_VERSION = "0.2"
_PROGRAM = "Seccubus"
_INDENT = "  "

# Characters outside the XML 1.0 Char production
_INVALID_XML_CHARS = re.compile("[^\x09\x0a\x0d\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")


def xml_header() -> str:
    return '<?xml version="1.0" encoding="UTF-8"?>\n'


def xml_open() -> str:
    return f'<IVIL version="{IVIL_VERSION}">\n'


def xml_close() -> str:
    return "</IVIL>\n"


def xml_add_addressee(workspace: str, scan: str | None) -> str:
    addressee = ET.Element("addressee")
    ET.SubElement(addressee, "program").text = _PROGRAM
    data = ET.SubElement(addressee, "programSpecificData")
    ET.SubElement(data, "workspace").text = _xml_text(workspace)
    ET.SubElement(data, "scan").text = _xml_text(scan or "")
    return _fragment(addressee)


def xml_add_sender(scanner: str, version: str | None, timestamp: str) -> str:
    sender = ET.Element("sender")
    ET.SubElement(sender, "scanner_type").text = _xml_text(scanner)
    ET.SubElement(sender, "version").text = _xml_text(version or "")
    ET.SubElement(sender, "timestamp").text = _xml_text(timestamp)
    return _fragment(sender)


def xml_add_findings(findings: Iterable[Finding]) -> str:
    """Render all findings as a single <findings> block, in order."""
    block = ET.Element("findings")
    for finding in findings:
        elem = ET.SubElement(block, "finding")
        ET.SubElement(elem, "ip").text = _xml_text(finding.ip)
        ET.SubElement(elem, "port").text = _xml_text(finding.port)
        ET.SubElement(elem, "id").text = _xml_text(finding.id)
        ET.SubElement(elem, "severity").text = str(finding.severity)
        ET.SubElement(elem, "finding_txt").text = _xml_text(finding.finding)
        if finding.references:
            refs = ET.SubElement(elem, "references")
            for ref_type, ids in finding.references.items():
                for ref_id in ids:
                    ET.SubElement(refs, ref_type).text = _xml_text(ref_id)
    return _fragment(block)


def _fragment(elem: ET.Element) -> str:
    ET.indent(elem, space=_INDENT, level=1)
    return _INDENT + ET.tostring(elem, encoding="unicode") + "\n"


def _xml_text(value: str) -> str:
    return _INVALID_XML_CHARS.sub("", value)
