"""Centralised settings for the repograph service.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (two levels up from this file)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


DEFAULT_EXCLUDED_PATHS: tuple[str, ...] = (
    "node_modules/", ".git/", "dist/", "build/", ".next/",
    "vendor/", "__pycache__/", ".cache/", ".vscode/", ".idea/",
    "coverage/", ".nyc_output/", ".turbo/", ".vercel/",
    "package-lock.json", "yarn.lock", "pnpm-lock.yaml",
)


def _csv_env(name: str, default: tuple[str, ...]) -> list[str]:
    raw = os.environ.get(name)
    if not raw:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Workspace / storage
    # ------------------------------------------------------------------
    workspace_dir: Path = field(
        default_factory=lambda: Path(
            os.environ.get("REPOGRAPH_WORKSPACE", Path.home() / ".repograph_data")
        )
    )

    @property
    def db_path(self) -> Path:
        """Absolute path to the SQLite database file."""
        return self.workspace_dir / "graphs.db"

    @property
    def schema_path(self) -> Path:
        """Absolute path to the schema SQL file bundled with the package."""
        return Path(__file__).resolve().parent / "db" / "schema.sql"

    # ------------------------------------------------------------------
    # GitHub API
    # ------------------------------------------------------------------
    github_api_base: str = field(
        default_factory=lambda: os.environ.get("GITHUB_API_BASE", "https://api.github.com")
    )
    github_token: str | None = field(
        default_factory=lambda: os.environ.get("GITHUB_TOKEN") or None
    )
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "30.0"))
    )
    excluded_paths: list[str] = field(
        default_factory=lambda: _csv_env("EXCLUDED_PATHS", DEFAULT_EXCLUDED_PATHS)
    )

    # ------------------------------------------------------------------
    # Pipeline limits
    # ------------------------------------------------------------------
    max_files: int = field(
        default_factory=lambda: int(os.environ.get("MAX_FILES", "10000"))
    )
    parse_timeout: float = field(
        default_factory=lambda: float(os.environ.get("PARSE_TIMEOUT", "120.0"))
    )
    max_concurrent_parses: int = field(
        default_factory=lambda: int(os.environ.get("MAX_CONCURRENT_PARSES", "2"))
    )
    max_graphs_per_caller: int = field(
        default_factory=lambda: int(os.environ.get("MAX_GRAPHS_PER_CALLER", "50"))
    )
    progress_buffer: int = field(
        default_factory=lambda: int(os.environ.get("PROGRESS_BUFFER", "64"))
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = field(
        default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO")
    )

    def ensure_workspace(self) -> None:
        """Create the workspace directory if it does not exist."""
        self.workspace_dir.mkdir(parents=True, exist_ok=True)


# Module-level singleton, import this everywhere:
#   from repograph.config import settings
settings = Settings()
