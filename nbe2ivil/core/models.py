from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class Finding:
    ip: str
    port: str
    id: str
    severity: int
    finding: str
    references: dict[str, list[str]] = field(default_factory=dict)
