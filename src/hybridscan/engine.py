"""Scan engine — orchestrates pattern matching, semantic review, fusion and scoring."""

from __future__ import annotations

import asyncio
import logging
import os
import time
from collections.abc import Sequence
from pathlib import Path

from hybridscan import fusion
from hybridscan.config import HybridScanConfig
from hybridscan.recommendations import build_recommendations
from hybridscan.registry.loader import default_registry, load_registry
from hybridscan.registry.models import SignatureRegistry
from hybridscan.review.client import SemanticReviewer
from hybridscan.review.models import report_to_findings
from hybridscan.scanner.languages import UNKNOWN_LANGUAGE, language_for_path, normalize_language
from hybridscan.scanner.matcher import PatternMatcher
from hybridscan.scanner.models import (
    Finding,
    ProjectScanResult,
    ScanResult,
    SemanticStatus,
)
from hybridscan.scoring import aggregate

logger = logging.getLogger(__name__)

# Directories to always skip
_SKIP_DIRS = {
    ".git",
    ".hg",
    ".svn",
    "node_modules",
    "__pycache__",
    ".mypy_cache",
    ".pytest_cache",
    ".ruff_cache",
    ".venv",
    "venv",
    ".env",
    "env",
    "dist",
    "build",
    ".tox",
    ".eggs",
}

# Binary / non-text extensions to skip
_SKIP_EXTENSIONS = {
    ".pyc",
    ".pyo",
    ".so",
    ".dylib",
    ".dll",
    ".exe",
    ".bin",
    ".png",
    ".jpg",
    ".jpeg",
    ".gif",
    ".ico",
    ".pdf",
    ".zip",
    ".tar",
    ".gz",
    ".whl",
    ".db",
    ".sqlite",
    ".sqlite3",
}

# Max file size to scan (1 MB)
_MAX_FILE_SIZE = 1_048_576


class ScanEngine:
    """Runs scans over source text, files and directories.

    ``detect`` and ``merge`` are usable on their own so a caller can run the
    semantic reviewer itself and join the two result sets later.
    """

    def __init__(
        self,
        registry: SignatureRegistry | None = None,
        reviewer: SemanticReviewer | None = None,
        config: HybridScanConfig | None = None,
    ) -> None:
        self.config = config or HybridScanConfig()
        if registry is None:
            registry = (
                load_registry(self.config.registry_path)
                if self.config.registry_path
                else default_registry()
            )
        self.registry = registry
        self.reviewer = reviewer
        self._matcher = PatternMatcher(registry)

    @classmethod
    def from_config(cls, config: HybridScanConfig, semantic: bool = True) -> ScanEngine:
        reviewer = SemanticReviewer.from_config(config) if semantic else None
        return cls(reviewer=reviewer, config=config)

    def detect(self, source_text: object, language: object, file_path: str = "") -> list[Finding]:
        return self._matcher.detect(source_text, language, file_path=file_path)

    @staticmethod
    def merge(
        pattern_findings: Sequence[Finding],
        semantic_findings: Sequence[Finding],
    ) -> list[Finding]:
        return fusion.merge(pattern_findings, semantic_findings)

    def scan(self, source_text: object, language: object, file_path: str = "") -> ScanResult:
        """Pattern-only scan. Never raises for odd input."""
        findings = self.detect(source_text, language, file_path=file_path)
        return self._build_result(
            findings,
            language=normalize_language(language),
            file_path=file_path,
            semantic_status=SemanticStatus.DISABLED,
        )

    async def scan_async(
        self,
        source_text: object,
        language: object,
        filename: str | None = None,
        file_path: str = "",
    ) -> ScanResult:
        """Pattern scan and semantic review in parallel, joined and fused.

        A reviewer that is missing, fails, times out or returns nothing
        leaves the result with pattern findings only and semantic status
        ``unavailable``.
        """
        tag = normalize_language(language)
        if self.reviewer is None:
            return self.scan(source_text, language, file_path=file_path)

        pattern_task = asyncio.to_thread(self.detect, source_text, language, file_path)
        if not isinstance(source_text, str) or not source_text.strip():
            pattern_findings = await pattern_task
            return self._build_result(
                pattern_findings,
                language=tag,
                file_path=file_path,
                semantic_status=SemanticStatus.DISABLED,
            )

        pattern_findings, report = await asyncio.gather(
            pattern_task,
            self._review(filename or file_path or "untitled", source_text, tag),
        )

        if report is None:
            return self._build_result(
                pattern_findings,
                language=tag,
                file_path=file_path,
                semantic_status=SemanticStatus.UNAVAILABLE,
                diagnostics=["Semantic review unavailable; results are pattern-only"],
            )

        semantic_findings, diagnostics = report_to_findings(report, file_path=file_path)
        merged = self.merge(pattern_findings, semantic_findings)
        return self._build_result(
            merged,
            language=tag,
            file_path=file_path,
            semantic_status=SemanticStatus.USED,
            diagnostics=diagnostics,
            extra_recommendations=report.recommendations,
        )

    def scan_file(self, path: str | Path, language: str | None = None) -> ScanResult:
        path = Path(path)
        content = path.read_text(encoding="utf-8", errors="ignore")
        return self.scan(content, language or language_for_path(path), file_path=str(path))

    async def scan_file_async(self, path: str | Path, language: str | None = None) -> ScanResult:
        path = Path(path)
        content = path.read_text(encoding="utf-8", errors="ignore")
        return await self.scan_async(
            content,
            language or language_for_path(path),
            filename=path.name,
            file_path=str(path),
        )

    def scan_directory(
        self,
        directory: str | Path,
        exclude_patterns: Sequence[str] = (),
    ) -> ProjectScanResult:
        """Pattern-scan every text file under *directory*."""
        directory = Path(directory).resolve()
        start = time.time()
        project = ProjectScanResult(directory=str(directory))

        for file_path in self._walk(directory, set(exclude_patterns)):
            try:
                result = self.scan_file(file_path)
            except (OSError, PermissionError) as e:
                logger.debug("Skipping %s: %s", file_path, e)
                project.files_skipped += 1
                continue
            project.files_scanned += 1
            project.files.append(result)

        return self._finish_project(project, start)

    async def scan_directory_async(
        self,
        directory: str | Path,
        exclude_patterns: Sequence[str] = (),
    ) -> ProjectScanResult:
        """Hybrid-scan every text file under *directory*, one file at a time."""
        directory = Path(directory).resolve()
        start = time.time()
        project = ProjectScanResult(directory=str(directory))

        for file_path in self._walk(directory, set(exclude_patterns)):
            try:
                if language_for_path(file_path) == UNKNOWN_LANGUAGE:
                    # No recognised language: wildcard signatures only, no review
                    result = self.scan_file(file_path)
                else:
                    result = await self.scan_file_async(file_path)
            except (OSError, PermissionError) as e:
                logger.debug("Skipping %s: %s", file_path, e)
                project.files_skipped += 1
                continue
            project.files_scanned += 1
            project.files.append(result)

        return self._finish_project(project, start)

    async def _review(self, filename: str, code: str, language: str):
        try:
            return await asyncio.wait_for(
                self.reviewer.review_code(filename, code, language),
                timeout=self.config.reviewer_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(
                "Semantic review of %s timed out after %.1fs",
                filename,
                self.config.reviewer_timeout,
            )
        except Exception:
            logger.exception("Semantic reviewer raised; continuing without it")
        return None

    def _build_result(
        self,
        findings: list[Finding],
        language: str,
        file_path: str,
        semantic_status: SemanticStatus,
        diagnostics: Sequence[str] = (),
        extra_recommendations: Sequence[str] = (),
    ) -> ScanResult:
        report = aggregate(findings, scale=self.config.score_scale)
        return ScanResult(
            findings=findings,
            score=report.score,
            summary=report.summary,
            recommendations=(
                build_recommendations(findings, extra_recommendations) if findings else []
            ),
            semantic_status=semantic_status,
            diagnostics=[*diagnostics, *report.diagnostics],
            language=language,
            file_path=file_path,
        )

    def _finish_project(self, project: ProjectScanResult, start: float) -> ProjectScanResult:
        for result in project.files:
            project.findings.extend(result.findings)
            project.diagnostics.extend(
                f"{result.file_path}: {note}" for note in result.diagnostics
            )

        report = aggregate(project.findings, scale=self.config.score_scale)
        project.score = report.score
        project.summary = report.summary
        if project.findings:
            project.recommendations = build_recommendations(project.findings)
        project.duration = time.time() - start
        return project

    def _walk(self, directory: Path, exclude: set[str]):
        """Walk directory yielding scannable files.

        Files with no recognised language are yielded only when the registry
        has wildcard signatures to run on them.
        """
        scan_unknown = bool(self.registry.applicable_signatures(UNKNOWN_LANGUAGE))
        for root, dirs, files in os.walk(directory):
            # Prune skipped directories in-place
            dirs[:] = sorted(
                d
                for d in dirs
                if d not in _SKIP_DIRS
                and not d.endswith(".egg-info")
                and d not in exclude
            )

            for name in sorted(files):
                path = Path(root) / name
                if path.suffix.lower() in _SKIP_EXTENSIONS:
                    continue
                if name in exclude:
                    continue
                if not scan_unknown and language_for_path(path) == UNKNOWN_LANGUAGE:
                    continue
                try:
                    if path.stat().st_size > _MAX_FILE_SIZE:
                        continue
                except OSError:
                    continue
                yield path
