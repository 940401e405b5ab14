"""Registry data models — severities and immutable vulnerability signatures."""

from __future__ import annotations

import enum
import re
from collections.abc import Iterator
from dataclasses import dataclass

WILDCARD_LANGUAGES = frozenset({"all", "*"})

_UNKNOWN_TYPE_DESCRIPTION = "Unknown vulnerability type"
_UNKNOWN_TYPE_REMEDIATION = "Review and fix this security issue"


class RegistryError(ValueError):
    """A signature registry could not be loaded or failed validation."""


class Severity(enum.Enum):
    """Finding severity level. Ordered low < medium < high < critical."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank < other.rank

    @classmethod
    def parse(cls, value: object) -> Severity | None:
        """Return the severity named by *value* (case-insensitive), or None."""
        if isinstance(value, Severity):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


_SEVERITY_RANK = {
    Severity.LOW: 0,
    Severity.MEDIUM: 1,
    Severity.HIGH: 2,
    Severity.CRITICAL: 3,
}


@dataclass(frozen=True)
class Signature:
    """A named, severity-tagged lexical pattern for one vulnerability category."""

    id: str
    name: str
    regex: re.Pattern[str]
    severity: Severity
    languages: frozenset[str]
    description: str = ""
    remediation: str = ""

    @property
    def is_wildcard(self) -> bool:
        return bool(self.languages & WILDCARD_LANGUAGES)

    def applies_to(self, language: str) -> bool:
        return self.is_wildcard or language in self.languages


class SignatureRegistry:
    """Read-only, ordered catalog of signatures.

    Built once (usually from YAML via ``hybridscan.registry.loader``) and
    passed into the matcher. Definition order is preserved and governs the
    order in which signatures are evaluated against each line.
    """

    def __init__(self, signatures: tuple[Signature, ...], name: str = "custom") -> None:
        seen: set[str] = set()
        for sig in signatures:
            if sig.id in seen:
                raise RegistryError(f"Duplicate signature id: {sig.id}")
            seen.add(sig.id)
        self.name = name
        self._signatures = tuple(signatures)
        self._by_id = {sig.id: sig for sig in self._signatures}
        self._by_name = {}
        for sig in self._signatures:
            self._by_name.setdefault(sig.name, sig)

    def __len__(self) -> int:
        return len(self._signatures)

    def __iter__(self) -> Iterator[Signature]:
        return iter(self._signatures)

    def __contains__(self, signature_id: object) -> bool:
        return signature_id in self._by_id

    @property
    def signatures(self) -> tuple[Signature, ...]:
        return self._signatures

    def get(self, signature_id: str) -> Signature | None:
        return self._by_id.get(signature_id)

    def applicable_signatures(self, language: str) -> tuple[Signature, ...]:
        """Signatures for *language*, in definition order.

        Unknown languages only receive wildcard signatures.
        """
        return tuple(sig for sig in self._signatures if sig.applies_to(language))

    def languages(self) -> frozenset[str]:
        """All concrete language tags named by any signature."""
        tags: set[str] = set()
        for sig in self._signatures:
            tags.update(sig.languages - WILDCARD_LANGUAGES)
        return frozenset(tags)

    def describe(self, type_name: str) -> str:
        sig = self._by_name.get(type_name)
        return sig.description if sig and sig.description else _UNKNOWN_TYPE_DESCRIPTION

    def remediation_for(self, type_name: str) -> str:
        sig = self._by_name.get(type_name)
        return sig.remediation if sig and sig.remediation else _UNKNOWN_TYPE_REMEDIATION
