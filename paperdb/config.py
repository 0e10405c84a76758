"""Centralised settings for paperdb.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env from the project root (two levels up from this file)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


def _optional_path(name: str) -> Optional[Path]:
    value = os.environ.get(name)
    return Path(value) if value else None


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Workspace / storage
    # ------------------------------------------------------------------
    workspace_dir: Path = field(
        default_factory=lambda: Path(
            os.environ.get("PAPERDB_HOME", Path.home() / ".paperdb")
        )
    )
    db_file: Optional[Path] = field(
        default_factory=lambda: _optional_path("PAPERDB_FILE")
    )

    @property
    def db_path(self) -> Path:
        """Absolute path to the SQLite database file.

        ``db_file`` wins when set (``PAPERDB_FILE`` or the CLI ``--db``
        option); otherwise the file lives in the workspace directory.
        """
        if self.db_file is not None:
            return self.db_file
        return self.workspace_dir / "library.db"

    @property
    def schema_path(self) -> Path:
        """Absolute path to the schema SQL file bundled with the package."""
        return Path(__file__).resolve().parent / "db" / "schema.sql"

    @property
    def drafts_dir(self) -> Path:
        """Where the paper form editor writes its temporary drafts."""
        return self.workspace_dir / "drafts"

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = field(
        default_factory=lambda: os.environ.get("PAPERDB_LOG_LEVEL", "WARNING")
    )


# Module-level singleton; import this everywhere:
#   from paperdb.config import settings
settings = Settings()
