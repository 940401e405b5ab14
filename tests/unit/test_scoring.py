"""Tests for security score aggregation and recommendations."""

from __future__ import annotations

import pytest

from hybridscan.recommendations import MAX_RECOMMENDATIONS, build_recommendations
from hybridscan.registry.models import Severity
from hybridscan.scanner.models import DetectionMethod, Finding, Location
from hybridscan.scoring import SEVERITY_WEIGHTS, ScoreScale, aggregate


def _finding(severity, confidence: float = 100, type: str = "Issue", line: int = 1) -> Finding:
    return Finding(
        id=f"f_{line}",
        type=type,
        severity=severity,
        location=Location(line=line),
        message="",
        confidence=confidence,
        detection_method=DetectionMethod.PATTERN,
    )


class TestAggregate:
    def test_empty_scores_maximum(self):
        report = aggregate([])
        assert report.score == 100
        assert report.summary == {"critical": 0, "high": 0, "medium": 0, "low": 0}
        assert report.diagnostics == []

    def test_empty_on_ten_scale(self):
        assert aggregate([], scale=ScoreScale.TEN).score == 10

    def test_weighted_by_confidence(self):
        findings = [
            _finding(Severity.CRITICAL, 100),
            _finding(Severity.HIGH, 50),
            _finding(Severity.LOW, 80),
        ]
        # 25 + 7.5 + 2.4
        assert aggregate(findings).score == 65.1

    def test_ten_scale_divides_penalty(self):
        findings = [_finding(Severity.CRITICAL, 100), _finding(Severity.MEDIUM, 100)]
        assert aggregate(findings, scale=ScoreScale.TEN).score == 6.7

    def test_floor_at_zero(self):
        findings = [_finding(Severity.CRITICAL, 100) for _ in range(10)]
        assert aggregate(findings).score == 0

    def test_summary_counts(self):
        findings = [
            _finding(Severity.CRITICAL),
            _finding(Severity.CRITICAL),
            _finding(Severity.MEDIUM),
        ]
        assert aggregate(findings).summary == {"critical": 2, "high": 0, "medium": 1, "low": 0}

    def test_unknown_severity_scored_as_low(self):
        report = aggregate([_finding("catastrophic", 100)])
        assert report.score == 97
        assert report.summary["low"] == 1
        assert len(report.diagnostics) == 1
        assert "catastrophic" in report.diagnostics[0]

    def test_string_severity_accepted(self):
        assert aggregate([_finding("high", 100)]).score == 85

    def test_score_bounds(self):
        for count in range(0, 8):
            for severity in Severity:
                score = aggregate([_finding(severity, 90) for _ in range(count)]).score
                assert 0 <= score <= 100

    def test_weight_ordering(self):
        w = SEVERITY_WEIGHTS
        assert w[Severity.CRITICAL] > w[Severity.HIGH] > w[Severity.MEDIUM] > w[Severity.LOW]
        assert w[Severity.CRITICAL] / w[Severity.LOW] == pytest.approx(25 / 3)


class TestScoreScale:
    def test_parse(self):
        assert ScoreScale.parse("10") == ScoreScale.TEN
        assert ScoreScale.parse(100) == ScoreScale.HUNDRED
        assert ScoreScale.parse(ScoreScale.TEN) == ScoreScale.TEN

    @pytest.mark.parametrize("value", ["5", "abc", ""])
    def test_parse_rejects(self, value: str):
        with pytest.raises(ValueError, match="score scale"):
            ScoreScale.parse(value)


class TestRecommendations:
    def test_specific_items_first(self):
        recs = build_recommendations(
            [_finding(Severity.CRITICAL, type="SQL Injection - String Concatenation")]
        )
        assert recs[0].startswith("CRITICAL: Replace string concatenation")

    def test_extra_items_deduplicated(self):
        recs = build_recommendations(
            [_finding(Severity.HIGH, type="XSS - Document Write")],
            extra=["Use HTTPS for all communications", "Rotate API keys"],
        )
        assert recs.count("Use HTTPS for all communications") == 1
        assert "Rotate API keys" in recs

    def test_capped(self):
        findings = [
            _finding(Severity.CRITICAL, type="SQL Injection"),
            _finding(Severity.CRITICAL, type="Command Injection - Shell Execution"),
            _finding(Severity.HIGH, type="XSS"),
            _finding(Severity.CRITICAL, type="Hardcoded Credentials"),
        ]
        recs = build_recommendations(findings)
        assert len(recs) == MAX_RECOMMENDATIONS
        assert recs[3] == "HIGH: Remove all hardcoded secrets and use secure secret management"
