"""
State of one execution of the installation script.
"""

import time
from enum import Enum
from typing import List, Optional

from qt6_installer.core.errors import InstallerError, NonZeroExit, ProcessCrash
from qt6_installer.core.output_classifier import (
    LogLine,
    classify_chunk,
    stderr_lines,
    strip_ansi,
)
from qt6_installer.core.progress_estimator import ProgressEstimator


class RunStatus(str, Enum):
    RUNNING = "running"
    STOPPED = "stopped"
    FINISHED = "finished"
    FAILED = "failed"


class InstallationRun:
    """
    One run of the script: its inputs, progress watermark and output.

    Progress starts at 0 for every run and never decreases. The log is
    append-only.
    """

    def __init__(self, script_path: str, build_qml: bool):
        self.script_path = script_path
        self.build_qml = build_qml
        self.status = RunStatus.RUNNING
        self.started_at = time.monotonic()
        self.finished_at: Optional[float] = None
        self.exit_code: Optional[int] = None
        self.failure: Optional[InstallerError] = None
        self._estimator = ProgressEstimator()
        self._log_lines: List[LogLine] = []

    @property
    def progress(self) -> int:
        return self._estimator.watermark

    @property
    def log_lines(self):
        """Read-only view of everything appended so far."""
        return tuple(self._log_lines)

    @property
    def is_active(self) -> bool:
        return self.status == RunStatus.RUNNING

    @property
    def elapsed_seconds(self) -> float:
        end = self.finished_at if self.finished_at is not None else time.monotonic()
        return end - self.started_at

    def append(self, line: LogLine) -> LogLine:
        self._log_lines.append(line)
        return line

    def ingest_stdout(self, text: str) -> List[LogLine]:
        """Classify a stdout chunk, record its lines and update progress."""
        lines = classify_chunk(text)
        self._log_lines.extend(lines)
        self._estimator.estimate(strip_ansi(text))
        return lines

    def ingest_stderr(self, text: str) -> List[LogLine]:
        lines = stderr_lines(text)
        self._log_lines.extend(lines)
        return lines

    def finish(self, exit_code: int, crashed: bool) -> Optional[InstallerError]:
        """
        Record the child's exit.

        Returns:
            The terminal failure, or None when the script succeeded
        """
        self.exit_code = exit_code
        self.finished_at = time.monotonic()
        if crashed:
            self.failure = ProcessCrash(exit_code)
        elif exit_code != 0:
            self.failure = NonZeroExit(exit_code)
        else:
            self._estimator.complete()

        self.status = RunStatus.FAILED if self.failure else RunStatus.FINISHED
        return self.failure

    def fail_to_start(self, error: InstallerError) -> None:
        self.failure = error
        self.finished_at = time.monotonic()
        self.status = RunStatus.FAILED

    def mark_stopped(self) -> None:
        self.finished_at = time.monotonic()
        self.status = RunStatus.STOPPED
