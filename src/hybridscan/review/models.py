"""Semantic reviewer payload models and conversion to findings."""

from __future__ import annotations

import logging
import re
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from hybridscan.registry.models import Severity
from hybridscan.scanner.models import DetectionMethod, Finding, Location

logger = logging.getLogger(__name__)

DEFAULT_CONFIDENCE = 80.0


class ReviewVulnerability(BaseModel):
    """One vulnerability as reported by the reviewer.

    Accepts both the flat shape (``line``, ``message``, ``suggestion``) and
    the nested one (``location``, ``description``, ``recommendation``).
    """

    type: str = "Unknown"
    severity: str = "medium"
    line: int = 1
    column: int | None = None
    message: str = "Security vulnerability detected"
    suggestion: str = ""
    confidence: float = DEFAULT_CONFIDENCE
    cwe_id: str | None = Field(default=None, alias="cweId")

    model_config = {"populate_by_name": True, "extra": "ignore"}

    @model_validator(mode="before")
    @classmethod
    def _flatten(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        location = data.pop("location", None)
        if isinstance(location, dict):
            data.setdefault("line", location.get("line"))
            data.setdefault("column", location.get("column"))
        if "message" not in data and "description" in data:
            data["message"] = data["description"]
        if "suggestion" not in data and "recommendation" in data:
            data["suggestion"] = data["recommendation"]
        # Explicit nulls fall back to defaults
        return {k: v for k, v in data.items() if v is not None}

    @field_validator("type", "message", "suggestion", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return str(value).strip()

    @field_validator("severity", mode="before")
    @classmethod
    def _coerce_severity(cls, value: Any) -> str:
        return str(value).strip().lower()

    @field_validator("line", mode="after")
    @classmethod
    def _clamp_line(cls, value: int) -> int:
        return max(1, value)

    @field_validator("confidence", mode="after")
    @classmethod
    def _normalize_confidence(cls, value: float) -> float:
        # Reviewers report either 0.0-1.0 or 0-100
        if 0 <= value <= 1:
            value *= 100
        return max(0.0, min(100.0, value))


class ReviewReport(BaseModel):
    """Full reviewer response.

    Vulnerability entries stay raw here. ``report_to_findings`` validates
    them one at a time and drops only the malformed ones.
    """

    vulnerabilities: list[Any] = Field(default_factory=list)
    overall_risk: str | None = Field(default=None, alias="overallRisk")
    summary: Any = None
    recommendations: list[str] = Field(default_factory=list)

    model_config = {"populate_by_name": True, "extra": "ignore"}

    @field_validator("vulnerabilities", "recommendations", mode="before")
    @classmethod
    def _list_or_empty(cls, value: Any) -> Any:
        return value if isinstance(value, list) else []


def report_to_findings(
    report: ReviewReport | None,
    file_path: str = "",
) -> tuple[list[Finding], list[str]]:
    """Convert a reviewer report to semantic findings plus data-quality notes."""
    if report is None:
        return [], []

    findings: list[Finding] = []
    diagnostics: list[str] = []
    for index, entry in enumerate(report.vulnerabilities):
        try:
            vuln = ReviewVulnerability.model_validate(entry)
        except ValidationError as e:
            note = f"Semantic finding #{index} dropped: {_first_error(e)}"
            logger.warning(note)
            diagnostics.append(note)
            continue

        type_name = vuln.type or "Unknown"
        severity = Severity.parse(vuln.severity)
        if severity is None:
            note = (
                f"Semantic finding {type_name!r} at line {vuln.line} has unknown "
                f"severity {vuln.severity!r}; treated as low"
            )
            logger.warning(note)
            diagnostics.append(note)
            severity = Severity.LOW

        findings.append(
            Finding(
                id=f"semantic_{_slug(type_name)}_{vuln.line}_{index}",
                type=type_name,
                severity=severity,
                location=Location(line=vuln.line, column=vuln.column),
                message=vuln.message,
                suggestion=vuln.suggestion,
                confidence=vuln.confidence,
                detection_method=DetectionMethod.SEMANTIC,
                file_path=file_path,
            )
        )

    return findings, diagnostics


def _first_error(error: ValidationError) -> str:
    detail = error.errors()[0]
    field = ".".join(str(part) for part in detail.get("loc", ())) or "entry"
    return f"{field}: {detail.get('msg', 'invalid')}"


def _slug(text: str) -> str:
    return re.sub(r"[^a-z0-9]+", "_", text.lower()).strip("_") or "finding"
