"""Security score aggregation — severity/confidence weighted penalties."""

from __future__ import annotations

import enum
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from hybridscan.registry.models import Severity
from hybridscan.scanner.models import Finding, empty_summary

logger = logging.getLogger(__name__)

SEVERITY_WEIGHTS = {
    Severity.CRITICAL: 25,
    Severity.HIGH: 15,
    Severity.MEDIUM: 8,
    Severity.LOW: 3,
}


class ScoreScale(enum.Enum):
    """Range of the security score. Weights are divided down for the 0-10 scale."""

    HUNDRED = 100
    TEN = 10

    @property
    def maximum(self) -> float:
        return float(self.value)

    @property
    def penalty_divisor(self) -> float:
        return 100.0 / self.value

    @classmethod
    def parse(cls, value: object) -> ScoreScale:
        if isinstance(value, ScoreScale):
            return value
        try:
            return cls(int(str(value).strip()))
        except ValueError:
            raise ValueError(f"Unsupported score scale: {value!r} (use 100 or 10)") from None


@dataclass
class ScoreReport:
    score: float
    summary: dict[str, int] = field(default_factory=empty_summary)
    diagnostics: list[str] = field(default_factory=list)


def aggregate(
    findings: Iterable[Finding],
    scale: ScoreScale = ScoreScale.HUNDRED,
) -> ScoreReport:
    """Turn a finding list into a bounded score and per-severity counts.

    An empty list scores the scale maximum. Unknown severities count as low
    and are reported in ``diagnostics``.
    """
    summary = empty_summary()
    diagnostics: list[str] = []
    total_penalty = 0.0

    for finding in findings:
        severity = Severity.parse(finding.severity)
        if severity is None:
            message = (
                f"Finding {finding.id!r} has unknown severity "
                f"{finding.severity!r}; scored as low"
            )
            logger.warning(message)
            diagnostics.append(message)
            severity = Severity.LOW

        confidence = max(0.0, min(100.0, float(finding.confidence)))
        total_penalty += SEVERITY_WEIGHTS[severity] * (confidence / 100)
        summary[severity.value] += 1

    score = scale.maximum - total_penalty / scale.penalty_divisor
    score = round(max(0.0, min(scale.maximum, score)), 1)
    return ScoreReport(score=score, summary=summary, diagnostics=diagnostics)
