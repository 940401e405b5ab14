"""General security recommendations derived from scan findings."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from hybridscan.scanner.models import Finding

MAX_RECOMMENDATIONS = 8

_GENERAL = [
    "Implement comprehensive input validation for all user inputs",
    "Use parameterized queries to prevent SQL injection attacks",
    "Sanitize and escape output to prevent XSS vulnerabilities",
    "Store sensitive configuration in environment variables",
    "Implement proper error handling without information disclosure",
    "Use HTTPS for all communications",
    "Implement proper authentication and authorization checks",
    "Keep all dependencies up to date",
    "Use static analysis tools in your CI/CD pipeline",
    "Conduct regular security code reviews",
]

# (type keywords, recommendation); the first keyword hit on any finding type wins
_SPECIFIC = [
    (
        ("sql injection",),
        "CRITICAL: Replace string concatenation in SQL queries with parameterized statements",
    ),
    (
        ("command injection",),
        "CRITICAL: Never pass user input to a shell; use argument lists instead",
    ),
    (
        ("xss", "cross-site scripting"),
        "HIGH: Implement output encoding and Content Security Policy (CSP)",
    ),
    (
        ("hardcoded credentials", "hardcoded secret", "hardcoded encryption key"),
        "HIGH: Remove all hardcoded secrets and use secure secret management",
    ),
]


def build_recommendations(
    findings: Iterable[Finding],
    extra: Sequence[str] = (),
) -> list[str]:
    """Specific items for the categories present, then *extra*, then general advice."""
    types = {f.type.lower() for f in findings}

    specific = [
        text
        for keywords, text in _SPECIFIC
        if any(keyword in t for t in types for keyword in keywords)
    ]

    recommendations: list[str] = []
    for item in [*specific, *extra, *_GENERAL]:
        item = item.strip()
        if item and item not in recommendations:
            recommendations.append(item)
    return recommendations[:MAX_RECOMMENDATIONS]
