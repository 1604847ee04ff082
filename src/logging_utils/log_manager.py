"""
Simple centralized log manager.
"""

import json
import logging
from typing import Any, Dict, List, Optional

import aiofiles

from ..utils.directories import resolve_log_directory
from .events import LogEvent


class LogManager:
    """Simple centralized logging manager."""

    def __init__(self, log_dir: Optional[str] = None):
        self.log_dir = resolve_log_directory(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)

        self.logger = logging.getLogger("LogManager")

        # JSON event log file
        self.event_log_file = self.log_dir / "events.jsonl"

    async def emit_event(self, event: LogEvent) -> None:
        """Emit a log event."""
        await self._write_event_to_file(event)

    async def _write_event_to_file(self, event: LogEvent) -> None:
        """Append event to the JSONL file."""
        try:
            event_dict = {
                "event_type": event.event_type,
                "timestamp": event.timestamp.isoformat() if event.timestamp else "",
                "correlation_id": event.correlation_id,
                "execution_id": event.execution_id,
                **{
                    k: v
                    for k, v in event.__dict__.items()
                    if k
                    not in [
                        "event_type",
                        "timestamp",
                        "correlation_id",
                        "execution_id",
                        "metadata",
                    ]
                },
                **(event.metadata or {}),
            }

            async with aiofiles.open(self.event_log_file, "a") as f:
                await f.write(json.dumps(event_dict, default=str) + "\n")

        except OSError as e:
            self.logger.error(f"Failed to write event to file: {e}")

    async def read_recent_events(
        self, count: Optional[int] = 50
    ) -> List[Dict[str, Any]]:
        """Read the most recent persisted events, oldest first.

        Returns every event when ``count`` is None.
        """
        if not self.event_log_file.exists():
            return []

        async with aiofiles.open(self.event_log_file, "r") as f:
            content = await f.read()

        events = []
        lines = content.splitlines()
        if count is not None:
            lines = lines[-count:] if count > 0 else []

        for line in lines:
            try:
                events.append(json.loads(line))
            except json.JSONDecodeError:
                self.logger.debug(f"Skipping malformed event line: {line[:80]}")
        return events
