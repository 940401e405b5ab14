"""Tests for merging pattern findings with semantic findings."""

from __future__ import annotations

import copy

from hybridscan.fusion import merge, overlaps
from hybridscan.registry.models import Severity
from hybridscan.scanner.models import DetectionMethod, Finding, Location


def _make_finding(
    type: str = "SQL Injection",
    line: int = 10,
    confidence: float = 80,
    method: DetectionMethod = DetectionMethod.PATTERN,
    suggestion: str = "Use parameterized queries",
    severity: Severity = Severity.CRITICAL,
) -> Finding:
    return Finding(
        id=f"{type.lower().replace(' ', '_')}_{line}",
        type=type,
        severity=severity,
        location=Location(line=line, column=0),
        message=f"{type} detected",
        confidence=confidence,
        detection_method=method,
        suggestion=suggestion,
    )


def _semantic(**kwargs) -> Finding:
    kwargs.setdefault("method", DetectionMethod.SEMANTIC)
    return _make_finding(**kwargs)


class TestOverlap:
    def test_adjacent_line_and_prefix(self):
        assert overlaps(_make_finding(line=10), _semantic(type="SQL Injection Risk", line=11))

    def test_case_insensitive_prefix(self):
        assert overlaps(_make_finding(type="XSS - Eval"), _semantic(type="xss via eval"))

    def test_first_word_may_be_prefix(self):
        assert overlaps(_make_finding(type="SQL Injection"), _semantic(type="SQLi attack"))

    def test_too_far_apart(self):
        assert not overlaps(_make_finding(line=10), _semantic(line=12))

    def test_different_category(self):
        assert not overlaps(_make_finding(type="SQL Injection"), _semantic(type="Hardcoded secret"))

    def test_semantic_word_shorter_than_pattern_word(self):
        assert not overlaps(_make_finding(type="Hardcoded Credentials"), _semantic(type="Hard coded"))


class TestMerge:
    def test_overlap_boosts_pattern_finding(self):
        pattern = [_make_finding(line=10, confidence=80)]
        semantic = [_semantic(type="SQL Injection Risk", line=11, suggestion="Use an ORM")]

        merged = merge(pattern, semantic)

        assert len(merged) == 1
        assert merged[0].line == 10
        assert merged[0].detection_method == DetectionMethod.HYBRID
        assert merged[0].confidence == 95
        assert merged[0].suggestion == "Use parameterized queries AI suggests: Use an ORM"

    def test_boost_is_capped(self):
        merged = merge([_make_finding(confidence=95)], [_semantic()])
        assert merged[0].confidence == 100

    def test_same_suggestion_not_appended(self):
        merged = merge([_make_finding()], [_semantic()])
        assert merged[0].suggestion == "Use parameterized queries"

    def test_empty_semantic_suggestion_not_appended(self):
        merged = merge([_make_finding()], [_semantic(suggestion="")])
        assert merged[0].suggestion == "Use parameterized queries"

    def test_suggestion_added_when_pattern_has_none(self):
        merged = merge([_make_finding(suggestion="")], [_semantic(suggestion="Escape input")])
        assert merged[0].suggestion == "AI suggests: Escape input"

    def test_novel_semantic_finding_appended_as_hybrid(self):
        pattern = [_make_finding(line=10)]
        semantic = [_semantic(type="Path Traversal", line=40, confidence=60)]

        merged = merge(pattern, semantic)

        assert len(merged) == 2
        assert merged[0].detection_method == DetectionMethod.PATTERN
        assert merged[1].type == "Path Traversal"
        assert merged[1].detection_method == DetectionMethod.HYBRID
        assert merged[1].confidence == 70

    def test_novel_boost_is_capped(self):
        merged = merge([], [_semantic(confidence=97)])
        assert merged[0].confidence == 100

    def test_only_first_overlapping_pattern_is_boosted(self):
        first = _make_finding(line=10, confidence=70)
        second = _make_finding(line=11, confidence=70)
        merged = merge([first, second], [_semantic(line=10)])

        assert [f.confidence for f in merged] == [85, 70]
        assert merged[1].detection_method == DetectionMethod.PATTERN

    def test_repeated_agreement_accumulates(self):
        merged = merge([_make_finding(confidence=60)], [_semantic(), _semantic(line=9)])
        assert len(merged) == 1
        assert merged[0].confidence == 90

    def test_novel_findings_do_not_absorb_later_ones(self):
        semantic = [
            _semantic(type="Path Traversal", line=40),
            _semantic(type="Path Traversal", line=41),
        ]
        merged = merge([], semantic)
        assert len(merged) == 2

    def test_order_pattern_then_novel(self):
        pattern = [_make_finding(type="XSS Eval", line=5), _make_finding(line=10)]
        semantic = [
            _semantic(type="Insecure Randomness", line=30),
            _semantic(type="SQL Injection", line=10),
            _semantic(type="CSRF", line=2),
        ]
        merged = merge(pattern, semantic)
        assert [f.type for f in merged] == [
            "XSS Eval",
            "SQL Injection",
            "Insecure Randomness",
            "CSRF",
        ]

    def test_inputs_not_mutated(self):
        pattern = [_make_finding()]
        semantic = [_semantic(suggestion="Other")]
        before_pattern = copy.deepcopy(pattern)
        before_semantic = copy.deepcopy(semantic)

        merge(pattern, semantic)

        assert pattern == before_pattern
        assert semantic == before_semantic


class TestMergeProperties:
    def test_empty_merge_is_identity(self):
        pattern = [_make_finding(line=1), _make_finding(type="XSS", line=2)]
        assert merge(pattern, []) == pattern

    def test_never_shrinks(self):
        pattern = [_make_finding(line=n) for n in range(1, 6)]
        semantic = [_semantic(line=n, type=t) for n, t in [(1, "SQL"), (3, "Other"), (50, "X")]]
        merged = merge(pattern, semantic)
        assert len(merged) >= len(pattern)
        assert [f.id for f in merged[: len(pattern)]] == [f.id for f in pattern]

    def test_confidence_never_exceeds_100(self):
        pattern = [_make_finding(confidence=100)]
        semantic = [_semantic(confidence=100), _semantic(type="Other", line=99, confidence=100)]
        assert all(f.confidence <= 100 for f in merge(pattern, semantic))
