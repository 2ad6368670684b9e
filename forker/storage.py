"""Per-repository JSON storage under .forker/.

One directory per tracked repository (sanitized name) holding
fork_info.json, peers.json and prs.json. Files are overwritten in full on
every save.
"""

import json
import logging
import shutil
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from forker.config import StorageConfig
from forker.errors import StorageError
from forker.utils import sanitize_name

FORK_INFO_FILE = "fork_info.json"
PEERS_FILE = "peers.json"
PRS_FILE = "prs.json"

LOG = logging.getLogger("forker.storage")


def _to_json(data: Any) -> Any:
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json")
    if isinstance(data, (list, tuple)):
        return [_to_json(item) for item in data]
    return data


class Storage:
    """Key-value store of fork data keyed by repository name."""

    def __init__(self, config: StorageConfig | None = None) -> None:
        self._config = config or StorageConfig()
        self._root = Path(self._config.base_path) / self._config.directory

    @property
    def root(self) -> Path:
        return self._root

    def ensure_root(self) -> Path:
        """Create the storage root if missing; return its path."""
        try:
            self._root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot create {self._root}: {e}") from e
        return self._root

    def directory_for(self, name: str) -> Path:
        """Create (if missing) and return the directory for a repository."""
        path = self.ensure_root() / sanitize_name(name)
        try:
            path.mkdir(exist_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot create {path}: {e}") from e
        return path

    def _write(self, name: str, filename: str, data: Any) -> Path:
        path = self.directory_for(name) / filename
        try:
            raw = json.dumps(_to_json(data), indent=2, ensure_ascii=False)
            path.write_text(raw + "\n", encoding="utf-8")
        except (OSError, TypeError, ValueError) as e:
            raise StorageError(f"Failed to write {path}: {e}") from e
        LOG.debug("Saved %s", path)
        return path

    def _read(self, name: str, filename: str, default: Any) -> Any:
        # Reads never create the repository directory.
        path = self.ensure_root() / sanitize_name(name) / filename
        if not path.is_file():
            return default
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"Failed to read {path}: {e}") from e

    def save_fork_info(self, name: str, data: Any) -> Path:
        return self._write(name, FORK_INFO_FILE, data)

    def load_fork_info(self, name: str) -> Any | None:
        """Return the stored fork record, or None if there is none."""
        return self._read(name, FORK_INFO_FILE, None)

    def save_peers(self, name: str, peers: Any) -> Path:
        return self._write(name, PEERS_FILE, peers)

    def load_peers(self, name: str) -> Any:
        """Return the stored peer list ([] if none)."""
        return self._read(name, PEERS_FILE, [])

    def save_prs(self, name: str, prs: Any) -> Path:
        return self._write(name, PRS_FILE, prs)

    def load_prs(self, name: str) -> Any:
        """Return the stored pull request list ([] if none)."""
        return self._read(name, PRS_FILE, [])

    def list_tracked(self) -> list[str]:
        """Names of tracked repositories (non-hidden subdirectories of the
        root), in no particular order."""
        root = self.ensure_root()
        try:
            return [p.name for p in root.iterdir() if p.is_dir() and not p.name.startswith(".")]
        except OSError as e:
            raise StorageError(f"Cannot list {root}: {e}") from e

    def delete_data(self, name: str) -> None:
        """Remove all stored data for a repository; no-op when absent."""
        path = self.ensure_root() / sanitize_name(name)
        if not path.is_dir():
            return
        try:
            shutil.rmtree(path)
        except OSError as e:
            raise StorageError(f"Failed to delete {path}: {e}") from e
        LOG.info("Deleted data for %s", name)
