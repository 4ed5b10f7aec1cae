"""File-backed memory using one JSONL file per conversation."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from synapse_agent.memory.base import Memory
from synapse_agent.types.messages import Message

logger = logging.getLogger(__name__)


class FileMemory(Memory):
    """Memory persisted as ``<base_dir>/<key>.jsonl``, one message per line.

    ``load()`` re-reads the file so several agent instances can share a
    conversation; ``create()`` appends a single line.
    """

    def __init__(self, base_dir: Path | str, key: str) -> None:
        if not key or not key.strip():
            raise ValueError("key must not be empty")
        self.base_dir = Path(base_dir).expanduser()
        self.base_dir.mkdir(parents=True, exist_ok=True)
        self.key = key
        self._messages: list[Message] = []

    @staticmethod
    def _sanitize_key(key: str) -> str:
        """Sanitize key for filesystem safety."""
        return key.replace(":", "_").replace("/", "_").replace("\\", "_")

    @property
    def path(self) -> Path:
        return self.base_dir / f"{self._sanitize_key(self.key)}.jsonl"

    async def load(self) -> None:
        if not self.path.exists():
            self._messages = []
            return

        messages: list[Message] = []
        with open(self.path, "r", encoding="utf-8") as f:
            for lineno, line in enumerate(f, start=1):
                if not line.strip():
                    continue
                try:
                    messages.append(Message.model_validate_json(line))
                except ValidationError:
                    logger.error("Corrupt memory line %d in %s", lineno, self.path)
                    raise
        self._messages = messages

    async def create(self, message: Message) -> None:
        with open(self.path, "a", encoding="utf-8") as f:
            f.write(message.model_dump_json() + "\n")
        self._messages.append(message)

    def get(self) -> list[Message]:
        return list(self._messages)

    async def clear(self) -> None:
        self._write_all([])
        self._messages = []

    def _write_all(self, messages: list[Message]) -> None:
        # Atomic write: write to temp file, then rename
        fd, temp_path = tempfile.mkstemp(dir=self.base_dir, prefix=".tmp_", suffix=".jsonl")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                for message in messages:
                    f.write(message.model_dump_json() + "\n")
            Path(temp_path).replace(self.path)
        except Exception:
            if os.path.exists(temp_path):
                os.unlink(temp_path)
            raise


__all__ = ["FileMemory"]
