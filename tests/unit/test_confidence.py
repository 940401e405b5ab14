"""Tests for pattern-match confidence heuristics."""

from __future__ import annotations

import pytest

from hybridscan.registry.models import Severity
from hybridscan.scanner.confidence import (
    is_comment_line,
    looks_like_test_code,
    score_confidence,
)


class TestScoreConfidence:
    @pytest.mark.parametrize(
        ("severity", "expected"),
        [
            (Severity.CRITICAL, 100),
            (Severity.HIGH, 95),
            (Severity.MEDIUM, 90),
            (Severity.LOW, 80),
        ],
    )
    def test_severity_in_code(self, severity: Severity, expected: int):
        assert score_confidence(severity, "x", "run(x)") == expected

    def test_comment_forgoes_code_bonus(self):
        code = score_confidence(Severity.HIGH, "md5", "digest = md5(data)")
        comment = score_confidence(Severity.HIGH, "md5", "  // digest = md5(data)")
        assert comment == code - 10

    @pytest.mark.parametrize("marker", ["//", "/*", "#"])
    def test_comment_markers(self, marker: str):
        assert score_confidence(Severity.LOW, "x", f"{marker} x") == 70

    def test_test_context_penalty(self):
        assert score_confidence(Severity.CRITICAL, "x", "mock_client.run(x)") == 80
        assert score_confidence(Severity.CRITICAL, "x", "def TestLogin(x)") == 80

    def test_lowest_combination_stays_in_range(self):
        value = score_confidence(Severity.LOW, "x", "# test mock")
        assert value == 50
        assert 30 <= value <= 100


class TestContextHelpers:
    def test_is_comment_line(self):
        assert is_comment_line("    # note")
        assert is_comment_line("\t/* block */")
        assert not is_comment_line("x = 1  # trailing")

    def test_looks_like_test_code(self):
        assert looks_like_test_code("assert Mock()")
        assert looks_like_test_code("TESTING = True")
        assert not looks_like_test_code("password = read()")
