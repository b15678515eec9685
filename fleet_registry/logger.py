"""Logging and audit journal module."""

import json
import logging
import logging.handlers
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional
from datetime import datetime, timezone


def configure_logging(level: str = "INFO", log_file: Optional[str] = "registry.log") -> None:
    """
    Configure structured logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        log_file: Path to log file, or None for console only
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    # Create formatter
    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Reconfiguring replaces the handlers installed by a previous call
    for handler in list(root_logger.handlers):
        if getattr(handler, "_fleet_registry", False):
            root_logger.removeHandler(handler)
            handler.close()

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    console_handler._fleet_registry = True
    root_logger.addHandler(console_handler)

    # File handler
    if log_file:
        file_handler = logging.handlers.RotatingFileHandler(
            log_file, maxBytes=10 * 1024 * 1024, backupCount=5
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        file_handler._fleet_registry = True
        root_logger.addHandler(file_handler)


class AuditJournal:
    """Append-only JSON lines journal of successful mutations."""

    def __init__(self, log_file: str = "registry-audit.jsonl"):
        """
        Initialize audit journal.

        Args:
            log_file: Path to JSON lines file
        """
        self.log_file = Path(log_file)
        self.log_file.parent.mkdir(parents=True, exist_ok=True)
        self.file_handle = open(self.log_file, "a", encoding="utf-8")
        self._lock = threading.Lock()

    def record(self, collection: str, operation: str, key: str, **details: Any) -> None:
        """
        Append one mutation entry.

        Args:
            collection: "aircraft" or "company"
            operation: Operation name (insert, update, delete, buy, ...)
            key: Identifier of the mutated record
            details: Extra JSON-serializable data
        """
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "collection": collection,
            "operation": operation,
            "key": key,
            "details": details,
        }

        with self._lock:
            json.dump(entry, self.file_handle)
            self.file_handle.write("\n")
            self.file_handle.flush()

    def close(self) -> None:
        """Close journal file."""
        with self._lock:
            if not self.file_handle.closed:
                self.file_handle.close()


def read_journal(log_file: str) -> List[Dict]:
    """
    Read back every entry of an audit journal.

    Args:
        log_file: Path to JSON lines file

    Returns:
        Entries in write order (empty if the file does not exist)
    """
    path = Path(log_file)
    if not path.exists():
        return []

    with open(path, "r", encoding="utf-8") as f:
        return [json.loads(line) for line in f if line.strip()]
