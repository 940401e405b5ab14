"""Pattern matcher — applies registry signatures line by line."""

from __future__ import annotations

import logging

from hybridscan.registry.loader import default_registry
from hybridscan.registry.models import SignatureRegistry
from hybridscan.scanner.confidence import score_confidence
from hybridscan.scanner.languages import normalize_language
from hybridscan.scanner.models import DetectionMethod, Finding, Location

logger = logging.getLogger(__name__)


class PatternMatcher:
    """Runs every applicable signature over every line of a source text."""

    def __init__(self, registry: SignatureRegistry | None = None) -> None:
        self.registry = registry if registry is not None else default_registry()

    def detect(self, source_text: object, language: object, file_path: str = "") -> list[Finding]:
        """Scan *source_text* and return pattern findings in line order.

        Non-string input is treated as empty and yields no findings.
        """
        if not isinstance(source_text, str):
            if source_text is not None:
                logger.debug("Ignoring non-text input of type %s", type(source_text).__name__)
            return []
        if not source_text:
            return []

        signatures = self.registry.applicable_signatures(normalize_language(language))
        if not signatures:
            return []

        findings: list[Finding] = []
        for line_num, line in enumerate(_split_lines(source_text), start=1):
            for sig in signatures:
                for sequence, match in enumerate(sig.regex.finditer(line)):
                    matched_text = match.group(0)
                    if not matched_text:
                        continue
                    column = match.start()
                    findings.append(
                        Finding(
                            id=f"{sig.id}_{line_num}_{column}_{sequence}",
                            type=sig.name,
                            severity=sig.severity,
                            location=Location(line=line_num, column=column),
                            message=sig.description,
                            suggestion=sig.remediation,
                            confidence=score_confidence(sig.severity, matched_text, line),
                            detection_method=DetectionMethod.PATTERN,
                            matched_text=matched_text,
                            file_path=file_path,
                        )
                    )

        return findings


def _split_lines(source_text: str) -> list[str]:
    """Split on LF only; form feeds and Unicode separators stay in their line."""
    return [line[:-1] if line.endswith("\r") else line for line in source_text.split("\n")]


def detect(
    source_text: object,
    language: object,
    registry: SignatureRegistry | None = None,
) -> list[Finding]:
    """Module-level shortcut for ``PatternMatcher(registry).detect(...)``."""
    return PatternMatcher(registry).detect(source_text, language)
