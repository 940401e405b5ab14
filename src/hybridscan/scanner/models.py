"""Scanner data models — findings and scan results."""

from __future__ import annotations

import enum
import time
from dataclasses import dataclass, field

from hybridscan.registry.models import Severity


class DetectionMethod(enum.Enum):
    """Provenance of a finding."""

    PATTERN = "pattern"
    SEMANTIC = "semantic"
    HYBRID = "hybrid"


class SemanticStatus(enum.Enum):
    """Whether semantic review contributed to a scan."""

    DISABLED = "disabled"
    UNAVAILABLE = "unavailable"
    USED = "used"


@dataclass(frozen=True)
class Location:
    """1-based line, 0-based column."""

    line: int
    column: int | None = None


@dataclass
class Finding:
    """A single potential vulnerability instance.

    Only the fusion pass updates a finding after creation (confidence,
    detection method, suggestion).
    """

    id: str
    type: str
    severity: Severity
    location: Location
    message: str
    confidence: float
    detection_method: DetectionMethod
    suggestion: str = ""
    matched_text: str = ""
    file_path: str = ""

    @property
    def line(self) -> int:
        return self.location.line

    @property
    def column(self) -> int | None:
        return self.location.column

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "type": self.type,
            "severity": self.severity.value,
            "location": {"line": self.location.line, "column": self.location.column},
            "message": self.message,
            "suggestion": self.suggestion,
            "confidence": self.confidence,
            "detectionMethod": self.detection_method.value,
        }
        if self.file_path:
            data["filePath"] = self.file_path
        return data


def empty_summary() -> dict[str, int]:
    return {severity.value: 0 for severity in reversed(Severity)}


@dataclass
class ScanResult:
    """Findings for one piece of source text plus derived score and summary."""

    findings: list[Finding] = field(default_factory=list)
    score: float = 100.0
    summary: dict[str, int] = field(default_factory=empty_summary)
    recommendations: list[str] = field(default_factory=list)
    semantic_status: SemanticStatus = SemanticStatus.DISABLED
    diagnostics: list[str] = field(default_factory=list)
    language: str = ""
    file_path: str = ""

    def to_dict(self) -> dict:
        return {
            "vulnerabilities": [f.to_dict() for f in self.findings],
            "securityScore": self.score,
            "summary": dict(self.summary),
            "recommendations": list(self.recommendations),
            "semanticStatus": self.semantic_status.value,
            "diagnostics": list(self.diagnostics),
        }


@dataclass
class ProjectScanResult:
    """Aggregate result of scanning a directory tree."""

    directory: str
    files: list[ScanResult] = field(default_factory=list)
    findings: list[Finding] = field(default_factory=list)
    score: float = 100.0
    summary: dict[str, int] = field(default_factory=empty_summary)
    recommendations: list[str] = field(default_factory=list)
    diagnostics: list[str] = field(default_factory=list)
    files_scanned: int = 0
    files_skipped: int = 0
    duration: float = 0.0
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> dict:
        return {
            "directory": self.directory,
            "vulnerabilities": [f.to_dict() for f in self.findings],
            "securityScore": self.score,
            "summary": dict(self.summary),
            "recommendations": list(self.recommendations),
            "diagnostics": list(self.diagnostics),
            "filesScanned": self.files_scanned,
            "filesSkipped": self.files_skipped,
            "duration": self.duration,
        }
