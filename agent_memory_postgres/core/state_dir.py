"""Per-user state directory holding the setup record and the event journal.

The directory is created lazily and never removed.  ``setup.json`` is
written by the external bootstrap process; this module only reads it.
Every operation here fails soft: a missing or unreadable setup artifact is
an expected state, not an error.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import ValidationError

from agent_memory_postgres.config import JOURNAL_FILENAME, SETUP_FILENAME
from agent_memory_postgres.core.models import SetupRecord

logger = logging.getLogger(__name__)


class StateDirectory:
    """Accessor for the state directory and the files it owns."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def setup_path(self) -> Path:
        return self._path / SETUP_FILENAME

    @property
    def journal_path(self) -> Path:
        return self._path / JOURNAL_FILENAME

    def ensure_directory(self) -> None:
        """Create the directory (and parents) if missing.  Never raises."""
        try:
            self._path.mkdir(parents=True, exist_ok=True)
        except Exception as e:
            logger.debug(f"Could not create state directory {self._path}: {e}")

    def has_setup(self) -> bool:
        """Whether the setup artifact exists.  ``False`` on any I/O error."""
        try:
            return self.setup_path.exists()
        except Exception as e:
            logger.debug(f"Setup existence check failed: {e}")
            return False

    def read_setup(self) -> SetupRecord | None:
        """Parse the setup artifact.

        Returns:
            The parsed record, or ``None`` when the file is missing,
            unreadable, not JSON, or not a JSON object of the expected shape.
        """
        try:
            raw = self.setup_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except Exception as e:
            logger.debug(f"Could not read {self.setup_path}: {e}")
            return None

        try:
            return SetupRecord.model_validate_json(raw)
        except ValidationError as e:
            logger.debug(f"Ignoring malformed setup record: {e.error_count()} error(s)")
            return None
