"""JSON document file client."""

import asyncio
import json
import os
import tempfile
from pathlib import Path
from typing import Any, Callable


class JsonFileClient:
    """A single JSON document on disk.

    The file is created with ``default_factory()`` on first access. Writes go
    to a temporary file that then replaces the target.
    """

    def __init__(self, path: str, default_factory: Callable[[], Any]):
        self._path = Path(path)
        self._default_factory = default_factory

    @property
    def path(self) -> Path:
        return self._path

    def _ensure_file(self) -> None:
        if self._path.exists():
            return
        self._path.parent.mkdir(parents=True, exist_ok=True)
        # Exclusive create: never replaces a document written in the meantime
        try:
            with open(self._path, "x", encoding="utf-8") as f:
                json.dump(self._default_factory(), f, indent=2)
        except FileExistsError:
            pass

    def _read_sync(self) -> Any:
        self._ensure_file()
        text = self._path.read_text(encoding="utf-8")
        # An empty file reads as the default document
        if not text.strip():
            return self._default_factory()
        return json.loads(text)

    def _write_sync(self, data: Any) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self._path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, allow_nan=False)
            os.replace(tmp_path, self._path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    async def read(self) -> Any:
        """Load the document.

        Raises:
            json.JSONDecodeError: If the file is not valid JSON.
            OSError: If the file cannot be read.
        """
        return await asyncio.to_thread(self._read_sync)

    async def write(self, data: Any) -> None:
        """Replace the document.

        Raises:
            OSError: If the file cannot be written.
            ValueError: If the document holds NaN or infinite floats.
        """
        await asyncio.to_thread(self._write_sync, data)
