"""Semantic reviewer collaborator — LLM-backed code review."""

from hybridscan.review.client import SemanticReviewer
from hybridscan.review.models import ReviewReport, ReviewVulnerability, report_to_findings

__all__ = ["ReviewReport", "ReviewVulnerability", "SemanticReviewer", "report_to_findings"]
