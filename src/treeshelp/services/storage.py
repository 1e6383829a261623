"""
treeshelp.services.storage

Local-disk storage for uploaded tree files.

Responsibilities:
- Store uploaded bytes under a random key inside the configured upload directory.
- Resolve and delete stored files by key.
"""

from __future__ import annotations

import uuid
from pathlib import Path


class FileStorage:
    def __init__(self, root: str | Path) -> None:
        self._root = Path(root)

    def save(self, data: bytes) -> str:
        self._root.mkdir(parents=True, exist_ok=True)
        key = uuid.uuid4().hex
        self.path_for(key).write_bytes(data)
        return key

    def path_for(self, key: str) -> Path:
        return self._root / key

    def delete(self, key: str) -> None:
        self.path_for(key).unlink(missing_ok=True)


# --- Module Notes -----------------------------------------------------------
# Keys are generated here, never taken from client filenames.
