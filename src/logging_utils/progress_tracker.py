"""
Progress tracking with rich progress integration for real-time messaging.
"""

from datetime import datetime
from typing import List, Optional

from rich.console import Console, Group
from rich.live import Live
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)
from rich.text import Text

from .events import StepCompleted, StepStarted
from .log_manager import LogManager


class ProgressTracker:
    """Progress tracker with rich progress for real-time messaging."""

    def __init__(self, log_manager: LogManager, console: Optional[Console] = None):
        self.log_manager = log_manager
        self.console = console or Console()
        self._progress: Optional[Progress] = None
        self._current_task: Optional[TaskID] = None
        self._step_messages: List[str] = []
        self._live: Optional[Live] = None

    @property
    def step_messages(self) -> List[str]:
        return list(self._step_messages)

    def start_execution_progress(
        self, total_steps: int, title: str = "📦 Devbox"
    ) -> None:
        """Start tracking execution progress."""
        self._step_messages = []
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
        )
        self._current_task = self._progress.add_task(title, total=total_steps)

        self._live = Live(
            self._create_display(), console=self.console, refresh_per_second=10
        )
        self._live.start()

    def _create_display(self):
        """Create the display group with progress bar and step messages."""
        if not self._progress:
            return Text("")

        step_text = Text()
        for msg in self._step_messages:
            step_text.append(f"{msg}\n")

        return Group(self._progress, step_text)

    def update_step_progress(self, increment: int = 1) -> None:
        """Update progress counter."""
        if self._progress and self._current_task is not None:
            self._progress.advance(self._current_task, increment)
            if self._live:
                self._live.update(self._create_display())

    def add_step_message(
        self, step_name: str, indent: int = 0, completed: bool = False
    ) -> None:
        """Add a step message and display it immediately below the progress bar."""
        status_icon = " ✅" if completed else " ❌"
        indent_amount = "  " * 2 * indent
        self._step_messages.append(f"{indent_amount}{step_name}{status_icon}")
        if self._live:
            self._live.update(self._create_display())

    def complete_execution_progress(self) -> None:
        """Complete the execution progress."""
        if self._live:
            self._live.stop()
            self._live = None
        self._progress = None
        self._current_task = None

    def track_step_execution(
        self,
        step_id: str,
        step_name: str,
        correlation_id: str,
        execution_id: str,
        tool: str = "",
        action: str = "",
    ):
        """Async context manager that emits step events and updates the display."""

        class StepTracker:
            def __init__(self, tracker):
                self.tracker = tracker
                self.start_time: Optional[datetime] = None
                self.failed = False
                self.error_message: Optional[str] = None

            def fail(self, message: str) -> None:
                """Mark the step failed without raising."""
                self.failed = True
                self.error_message = message

            async def __aenter__(self):
                self.start_time = datetime.utcnow()

                await self.tracker.log_manager.emit_event(
                    StepStarted(
                        timestamp=self.start_time,
                        correlation_id=correlation_id,
                        execution_id=execution_id,
                        step_id=step_id,
                        step_name=step_name,
                        tool=tool,
                        action=action,
                    )
                )
                return self

            async def __aexit__(self, exc_type, exc_val, exc_tb):
                end_time = datetime.utcnow()
                duration = (end_time - (self.start_time or end_time)).total_seconds()
                success = exc_type is None and not self.failed
                error = str(exc_val) if exc_val else self.error_message

                self.tracker.update_step_progress()
                self.tracker.add_step_message(step_name, completed=success)

                await self.tracker.log_manager.emit_event(
                    StepCompleted(
                        timestamp=end_time,
                        correlation_id=correlation_id,
                        execution_id=execution_id,
                        step_id=step_id,
                        step_name=step_name,
                        success=success,
                        duration_seconds=duration,
                        error_message=error,
                    )
                )

        return StepTracker(self)
