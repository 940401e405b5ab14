"""Result fusion — merges pattern findings with semantic reviewer findings."""

from __future__ import annotations

import copy
import logging
from collections.abc import Sequence

from hybridscan.scanner.models import DetectionMethod, Finding

logger = logging.getLogger(__name__)

AGREEMENT_BOOST = 15
NOVEL_FINDING_BOOST = 10
MAX_CONFIDENCE = 100
LINE_TOLERANCE = 1
SUGGESTION_ADDENDUM = "AI suggests:"


def merge(
    pattern_findings: Sequence[Finding],
    semantic_findings: Sequence[Finding],
) -> list[Finding]:
    """Fuse two finding sets.

    The result holds a copy of every pattern finding, in input order,
    followed by semantic findings that overlapped none of them. A pattern
    finding that a semantic finding agrees with (within one line, matching
    leading type word) is boosted and marked hybrid. Inputs are not
    modified and nothing is ever dropped.
    """
    merged = [copy.copy(f) for f in pattern_findings]
    pattern_count = len(merged)

    for semantic in semantic_findings:
        target = _find_overlap(merged[:pattern_count], semantic)
        if target is None:
            novel = copy.copy(semantic)
            novel.detection_method = DetectionMethod.HYBRID
            novel.confidence = min(semantic.confidence + NOVEL_FINDING_BOOST, MAX_CONFIDENCE)
            merged.append(novel)
            continue

        logger.debug(
            "Semantic finding %s corroborates %s at line %d",
            semantic.id,
            target.id,
            target.line,
        )
        target.confidence = min(target.confidence + AGREEMENT_BOOST, MAX_CONFIDENCE)
        target.detection_method = DetectionMethod.HYBRID
        if semantic.suggestion and semantic.suggestion != target.suggestion:
            target.suggestion = _append_suggestion(target.suggestion, semantic.suggestion)

    return merged


def overlaps(pattern_finding: Finding, semantic_finding: Finding) -> bool:
    """Whether two findings describe the same issue.

    Lines must be at most one apart and the first word of the pattern type
    must be a prefix of the first word of the semantic type.
    """
    if abs(pattern_finding.line - semantic_finding.line) > LINE_TOLERANCE:
        return False
    pattern_word = _leading_word(pattern_finding.type)
    if not pattern_word:
        return False
    return _leading_word(semantic_finding.type).startswith(pattern_word)


def _find_overlap(candidates: list[Finding], semantic: Finding) -> Finding | None:
    for candidate in candidates:
        if overlaps(candidate, semantic):
            return candidate
    return None


def _leading_word(type_name: str) -> str:
    words = type_name.split()
    return words[0].lower() if words else ""


def _append_suggestion(current: str, extra: str) -> str:
    if not current:
        return f"{SUGGESTION_ADDENDUM} {extra}"
    return f"{current} {SUGGESTION_ADDENDUM} {extra}"
