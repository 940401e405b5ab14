"""Language tag normalization and extension mapping."""

from __future__ import annotations

from pathlib import Path

UNKNOWN_LANGUAGE = "unknown"

# File extension → language tag
_EXTENSIONS = {
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".ts": "typescript",
    ".tsx": "typescript",
    ".py": "python",
    ".java": "java",
    ".cs": "c#",
    ".php": "php",
}

_ALIASES = {
    "js": "javascript",
    "jsx": "javascript",
    "node": "javascript",
    "ts": "typescript",
    "tsx": "typescript",
    "py": "python",
    "python3": "python",
    "cs": "c#",
    "csharp": "c#",
    "c-sharp": "c#",
}


def normalize_language(language: object) -> str:
    """Lower-case and de-alias a language tag. Non-strings become ``unknown``."""
    if not isinstance(language, str):
        return UNKNOWN_LANGUAGE
    tag = language.strip().lower()
    if not tag:
        return UNKNOWN_LANGUAGE
    return _ALIASES.get(tag, tag)


def language_for_path(path: str | Path) -> str:
    return _EXTENSIONS.get(Path(path).suffix.lower(), UNKNOWN_LANGUAGE)


def supported_extensions() -> frozenset[str]:
    return frozenset(_EXTENSIONS)
