"""Confidence heuristics for pattern matches."""

from __future__ import annotations

from hybridscan.registry.models import Severity

BASE_CONFIDENCE = 70
MIN_CONFIDENCE = 30
MAX_CONFIDENCE = 100

CODE_CONTEXT_BONUS = 10
TEST_CONTEXT_PENALTY = 20

SEVERITY_BONUS = {
    Severity.CRITICAL: 20,
    Severity.HIGH: 15,
    Severity.MEDIUM: 10,
    Severity.LOW: 0,
}

_COMMENT_MARKERS = ("//", "/*", "#")
_TEST_MARKERS = ("test", "mock")


def score_confidence(severity: Severity, matched_text: str, line: str) -> int:
    """Confidence in [30, 100] for a match of *matched_text* on *line*.

    Severity raises confidence, a comment-only line forgoes the code bonus,
    and test/mock context lowers it.
    """
    confidence = BASE_CONFIDENCE + SEVERITY_BONUS.get(severity, 0)

    if not is_comment_line(line):
        confidence += CODE_CONTEXT_BONUS

    if looks_like_test_code(line):
        confidence -= TEST_CONTEXT_PENALTY

    return max(MIN_CONFIDENCE, min(MAX_CONFIDENCE, confidence))


def is_comment_line(line: str) -> bool:
    return line.lstrip().startswith(_COMMENT_MARKERS)


def looks_like_test_code(line: str) -> bool:
    lowered = line.lower()
    return any(marker in lowered for marker in _TEST_MARKERS)
