"""
core/logger.py — JSONL structured logger for the Kairen transliterator.

KairenLogger writes one JSON object per line to <log_dir>/kairen_{date}.jsonl,
rotating automatically each day. WARN/ERROR/CRITICAL are also mirrored
to Python stdlib logging (stderr). Thread-safe via threading.Lock.

The log directory is read from the ``KAIREN_LOG_DIR`` environment variable
(default ``logs``) when the singleton is first created.

Usage::

    from core.logger import get_logger
    log = get_logger()
    log.info("pipeline", "segmented", {"tokens": 6})
    log.perf("pipeline", "convert_done", latency_ms=3.2, data={"words": 3})
"""

from __future__ import annotations

import json
import logging
import os
import platform
import sys
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

# ── stdlib mirror logger (stderr for WARN+) ──────────────────
_stdlib = logging.getLogger("kairen")
if not _stdlib.handlers:
    _handler = logging.StreamHandler(sys.stderr)
    _handler.setFormatter(logging.Formatter("[%(levelname)s] %(name)s — %(message)s"))
    _stdlib.addHandler(_handler)
_stdlib.setLevel(logging.DEBUG)
_stdlib.propagate = False

# ── Level ordering for the JSONL threshold ───────────────────
_LEVELS: dict[str, int] = {
    "DEBUG": 10,
    "INFO": 20,
    "PERF": 20,
    "WARN": 30,
    "ERROR": 40,
    "CRITICAL": 50,
}

# ── Singleton storage ─────────────────────────────────────────
_instance: Optional["KairenLogger"] = None
_instance_lock = threading.Lock()


class KairenLogger:
    """
    Singleton JSONL structured logger for the Kairen transliterator.

    Each call to a log method appends a single JSON line to
    ``<log_dir>/kairen_{YYYY-MM-DD}.jsonl``. A new file is opened
    automatically when the calendar date changes.

    Fields written per entry:

    .. code-block:: json

        {
          "timestamp_iso": "2026-10-17T01:20:49.123456+00:00",
          "level": "INFO",
          "phase": "pipeline",
          "event": "segmented",
          "data": {"tokens": 6},
          "latency_ms": 1.5
        }

    ``latency_ms`` is omitted when ``None``. Entries below the configured
    threshold (see :meth:`set_level`) are dropped.

    Do not instantiate directly — use :func:`get_logger`.

    Args:
        log_dir: Directory receiving the JSONL files.
    """

    def __init__(self, log_dir: Path) -> None:
        """Open the log file for today and write the startup entry."""
        self._lock = threading.Lock()
        self._log_dir = log_dir
        self._file: Optional[Any] = None
        self._current_date: str = ""
        self._threshold: int = _LEVELS["DEBUG"]
        self._open_file()
        self._write_startup()

    # ──────────────────────────────────────────
    # Public logging methods
    # ──────────────────────────────────────────

    def debug(self, phase: str, event: str, data: Optional[dict] = None) -> None:
        """
        Write a DEBUG-level structured log entry (per-word diagnostics).

        Args:
            phase: System phase or subsystem (e.g. ``'ipa'``, ``'cipher'``).
            event: Short event identifier.
            data: Optional dict of additional key-value context.
        """
        self._write("DEBUG", phase, event, data)

    def info(self, phase: str, event: str, data: Optional[dict] = None) -> None:
        """
        Write an INFO-level structured log entry.

        Args:
            phase: System phase or subsystem (e.g. ``'pipeline'``, ``'lookup'``).
            event: Short event identifier (e.g. ``'segmented'``).
            data: Optional dict of additional key-value context.
        """
        self._write("INFO", phase, event, data)

    def warn(self, phase: str, event: str, data: Optional[dict] = None) -> None:
        """
        Write a WARN-level entry and mirror to stderr via stdlib logging.

        Args:
            phase: System phase.
            event: Short event identifier.
            data: Optional context dict.
        """
        if self._write("WARN", phase, event, data):
            _stdlib.warning("[%s] %s | %s", phase, event, data or {})

    def error(self, phase: str, event: str, data: Optional[dict] = None) -> None:
        """
        Write an ERROR-level entry and mirror to stderr via stdlib logging.

        Args:
            phase: System phase.
            event: Short event identifier.
            data: Optional context dict.
        """
        if self._write("ERROR", phase, event, data):
            _stdlib.error("[%s] %s | %s", phase, event, data or {})

    def critical(self, phase: str, event: str, data: Optional[dict] = None) -> None:
        """
        Write a CRITICAL-level entry and mirror to stderr via stdlib logging.

        Args:
            phase: System phase.
            event: Short event identifier.
            data: Optional context dict.
        """
        if self._write("CRITICAL", phase, event, data):
            _stdlib.critical("[%s] %s | %s", phase, event, data or {})

    def perf(
        self,
        phase: str,
        event: str,
        latency_ms: float,
        data: Optional[dict] = None,
    ) -> None:
        """
        Write a PERF-level entry for latency tracking.

        Args:
            phase: Subsystem the measurement belongs to (e.g. ``'pipeline'``).
            event: What was measured (e.g. ``'convert_done'``).
            latency_ms: Measured latency in milliseconds.
            data: Optional additional context dict.
        """
        self._write("PERF", phase, event, data, latency_ms=latency_ms)

    def set_level(self, level: str) -> None:
        """
        Set the minimum level written to the JSONL file.

        Args:
            level: One of ``DEBUG``, ``INFO``, ``WARN``, ``ERROR``, ``CRITICAL``.

        Raises:
            ValueError: If *level* is not a known level name.
        """
        key = level.upper()
        if key == "WARNING":
            key = "WARN"
        if key not in _LEVELS or key == "PERF":
            raise ValueError(f"Unknown log level: {level!r}")
        with self._lock:
            self._threshold = _LEVELS[key]

    @property
    def log_dir(self) -> Path:
        """Directory receiving the JSONL files."""
        return self._log_dir

    @property
    def current_path(self) -> Path:
        """Path of the JSONL file currently being written."""
        return self._log_dir / f"kairen_{self._current_date}.jsonl"

    def flush(self) -> None:
        """
        Flush the underlying file buffer immediately.

        Call this before process exit to ensure no log entries are lost
        in the OS buffer.
        """
        with self._lock:
            if self._file and not self._file.closed:
                self._file.flush()

    # ──────────────────────────────────────────
    # Internal helpers
    # ──────────────────────────────────────────

    def _write(
        self,
        level: str,
        phase: str,
        event: str,
        data: Optional[dict],
        latency_ms: Optional[float] = None,
    ) -> bool:
        """
        Serialise and append one JSON line to the log file.

        Performs daily rotation check on every write (cheap date compare).
        Thread-safe via ``self._lock``.

        Args:
            level: Log level string.
            phase: Subsystem phase.
            event: Event identifier.
            data: Context dict (may be None).
            latency_ms: Optional latency value.

        Returns:
            ``True`` if the entry passed the level threshold and was written.
        """
        if _LEVELS[level] < self._threshold:
            return False

        now = datetime.now(tz=timezone.utc)
        record: dict[str, Any] = {
            "timestamp_iso": now.isoformat(),
            "level": level,
            "phase": phase,
            "event": event,
            "data": data or {},
        }
        if latency_ms is not None:
            record["latency_ms"] = round(latency_ms, 3)

        line = json.dumps(record, ensure_ascii=False, separators=(",", ":"), default=str)

        with self._lock:
            self._rotate_if_needed(now)
            if self._file and not self._file.closed:
                self._file.write(line + "\n")
                self._file.flush()
        return True

    def _rotate_if_needed(self, now: datetime) -> None:
        """
        Open a new log file if the calendar date has changed.

        Called inside ``self._lock`` — do not call from outside.

        Args:
            now: Current UTC datetime.
        """
        today = now.strftime("%Y-%m-%d")
        if today != self._current_date:
            if self._file and not self._file.closed:
                self._file.close()
            self._current_date = today
            self._log_dir.mkdir(parents=True, exist_ok=True)
            log_path = self._log_dir / f"kairen_{today}.jsonl"
            self._file = open(log_path, "a", encoding="utf-8", buffering=1)  # noqa: WPS515

    def _open_file(self) -> None:
        """Open the log file for today's date (called once on init)."""
        now = datetime.now(tz=timezone.utc)
        with self._lock:
            self._rotate_if_needed(now)

    def _write_startup(self) -> None:
        """Write a startup entry with Python version, platform, and timestamp."""
        self.info(
            phase="system",
            event="startup",
            data={
                "python_version": sys.version,
                "platform": platform.platform(),
                "timestamp_local": datetime.now().isoformat(),
            },
        )


# ──────────────────────────────────────────────────────────────
# Singleton accessor
# ──────────────────────────────────────────────────────────────

def get_logger() -> KairenLogger:
    """
    Return the singleton :class:`KairenLogger` instance.

    Thread-safe: the first call creates the instance; subsequent calls
    return the same object without acquiring the creation lock.

    Returns:
        The application-wide :class:`KairenLogger`.
    """
    global _instance
    if _instance is None:
        with _instance_lock:
            if _instance is None:
                log_dir = Path(os.environ.get("KAIREN_LOG_DIR", "logs"))
                _instance = KairenLogger(log_dir)
    return _instance
