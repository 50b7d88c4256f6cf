"""JSON run logs written after each ``ozz update``.

One file per run, ``<YYYY-MM-DD>_<HHMMSS>_<command>.json``, in ``OZZ_LOG_DIR``
(default ``./logs``).
"""

from __future__ import annotations

import json
import os
from collections.abc import Mapping, Sequence
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from .logging_setup import get_logger

_logger = get_logger("ozz.runlog")


def get_log_dir() -> Path:
    root = os.getenv("OZZ_LOG_DIR")
    if root and root.strip():
        return Path(root).expanduser()
    return Path.cwd() / "logs"


class RunLog:
    """Accumulates the context of one command run and writes it as JSON."""

    def __init__(
        self,
        command: str,
        args: Mapping[str, Any],
        *,
        log_dir: str | os.PathLike[str] | None = None,
        now: datetime | None = None,
    ) -> None:
        self.command = command
        self.args = dict(args)
        self._log_dir = Path(log_dir) if log_dir is not None else None
        self._started = now or datetime.now()

    @property
    def filename(self) -> str:
        return f"{self._started:%Y-%m-%d_%H%M%S}_{self.command}.json"

    def write(
        self,
        results: Mapping[str, Any],
        transactions: Sequence[Mapping[str, Any]] | None = None,
        skipped: Sequence[Mapping[str, Any]] | None = None,
    ) -> Path:
        log_dir = self._log_dir or get_log_dir()
        log_dir.mkdir(parents=True, exist_ok=True)

        entry: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "command": self.command,
            "args": self.args,
            "results": dict(results),
        }
        if transactions is not None:
            entry["transactions"] = list(transactions)
        if skipped is not None:
            entry["skipped"] = list(skipped)

        path = log_dir / self.filename
        path.write_text(json.dumps(entry, indent=2, ensure_ascii=False, default=str), encoding="utf-8")
        _logger.debug("runlog:written path=%s", path)
        return path
