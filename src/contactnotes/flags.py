"""Persisted migration flags."""

from __future__ import annotations

import logging
import os
from typing import Dict, Optional

import yaml

from .models import MigrationState
from .store import StoreError, write_atomic

logger = logging.getLogger(__name__)


class FlagStore:
    """Boolean key/value flags kept in a small YAML file.

    Without a path the flags only live for the lifetime of the object. An
    unreadable file is treated as no flags set, since every step is safe to
    run again.
    """

    def __init__(self, path: Optional[str] = None) -> None:
        self.path = path
        self._flags: Dict[str, bool] = self._read()

    def _read(self) -> Dict[str, bool]:
        if not self.path or not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as handle:
                data = yaml.safe_load(handle) or {}
        except (OSError, yaml.YAMLError) as exc:
            logger.warning("Ignoring unreadable flags file %s: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring flags file %s, expected a mapping", self.path)
            return {}
        return {str(key): bool(value) for key, value in data.items()}

    def _write(self) -> None:
        if not self.path:
            return
        try:
            write_atomic(self.path, lambda handle: yaml.safe_dump(self._flags, handle, sort_keys=True))
        except (OSError, yaml.YAMLError) as exc:
            raise StoreError(f"Could not write flags to {self.path}: {exc}") from exc

    def get_bool(self, key: str) -> bool:
        return self._flags.get(key, False)

    def set_bool(self, key: str, value: bool) -> None:
        self._flags[key] = bool(value)
        self._write()
        logger.debug("Flag %s set to %s", key, value)

    def load_state(self) -> MigrationState:
        return MigrationState(completed=dict(self._flags))

    def save_state(self, state: MigrationState) -> None:
        self._flags.update({key: bool(value) for key, value in state.completed.items()})
        self._write()
