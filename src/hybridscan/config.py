"""Global configuration — XDG paths, env vars, defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from hybridscan.scoring import ScoreScale


def _default_config_dir() -> Path:
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "hybridscan"
    return Path.home() / ".config" / "hybridscan"


@dataclass
class HybridScanConfig:
    """Application-wide configuration."""

    config_dir: Path = field(default_factory=_default_config_dir)
    registry_path: Path | None = None
    score_scale: ScoreScale = ScoreScale.HUNDRED
    reviewer_url: str = "https://api.openai.com/v1"
    reviewer_model: str = "gpt-4o"
    reviewer_timeout: float = 30.0
    reviewer_api_key: str | None = field(default=None, repr=False)
    verbose: bool = False

    @classmethod
    def load(cls) -> HybridScanConfig:
        """Load config from environment variables with XDG defaults."""
        config = cls()

        env_registry = os.environ.get("HYBRIDSCAN_REGISTRY")
        if env_registry:
            config.registry_path = Path(env_registry)
        else:
            # Fall back to a registry.yaml in the config dir if one exists
            user_registry = config.config_dir / "registry.yaml"
            if user_registry.is_file():
                config.registry_path = user_registry

        env_scale = os.environ.get("HYBRIDSCAN_SCORE_SCALE")
        if env_scale:
            config.score_scale = ScoreScale.parse(env_scale)

        env_url = os.environ.get("HYBRIDSCAN_REVIEWER_URL")
        if env_url:
            config.reviewer_url = env_url

        env_model = os.environ.get("HYBRIDSCAN_REVIEWER_MODEL")
        if env_model:
            config.reviewer_model = env_model

        env_timeout = os.environ.get("HYBRIDSCAN_REVIEWER_TIMEOUT")
        if env_timeout:
            config.reviewer_timeout = float(env_timeout)

        config.reviewer_api_key = os.environ.get(
            "HYBRIDSCAN_REVIEWER_API_KEY"
        ) or os.environ.get("OPENAI_API_KEY")

        return config
