"""
Process Supervisor for the Qt6 Installer front-end.
Owns the single installation-script child process, streams its output as typed
events and kills the whole process tree on request.
"""

import os
import queue
import subprocess
import threading
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Union

import psutil

from qt6_installer.config.AppConfig import AppConfig
from qt6_installer.core.errors import StartError


@dataclass(frozen=True)
class StdoutChunk:
    """Raw bytes read from the child's stdout."""
    data: bytes


@dataclass(frozen=True)
class StderrChunk:
    """Raw bytes read from the child's stderr."""
    data: bytes


@dataclass(frozen=True)
class ProcessExited:
    """The child terminated; always the last event of a run."""
    exit_code: int
    crashed: bool


ProcessEvent = Union[StdoutChunk, StderrChunk, ProcessExited]


class ProcessListener:
    """Observer interface for supervisor events. Override what you need."""

    def on_stdout_chunk(self, data: bytes) -> None:
        pass

    def on_stderr_chunk(self, data: bytes) -> None:
        pass

    def on_exit(self, exit_code: int, crashed: bool) -> None:
        pass


class ProcessSupervisor:
    """Manages the one installation-script process at a time."""

    def __init__(self, shell_path: Optional[str] = None, logger: Optional[logging.Logger] = None):
        """
        Initialize the supervisor.

        Args:
            shell_path: Interpreter used to run scripts (defaults to the configured shell)
            logger: Optional logger, defaults to this module's logger
        """
        self.shell_path = shell_path or AppConfig().shell_path
        self.logger = logger or logging.getLogger(__name__)
        self._process: Optional[subprocess.Popen] = None
        self._lock = threading.Lock()
        # Entries are (generation, event); generation identifies the child that produced them
        self._events: "queue.Queue[Tuple[int, ProcessEvent]]" = queue.Queue()
        self._generation = 0
        self._listeners: List[ProcessListener] = []
        self._exit_queued = threading.Event()
        self._exit_queued.set()

    # ------------------------------------------------------------------
    # Listener registration
    # ------------------------------------------------------------------

    def add_listener(self, listener: ProcessListener) -> None:
        """Register an observer for stdout/stderr/exit events."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: ProcessListener) -> None:
        """Unregister a previously added observer."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def is_running(self) -> bool:
        """
        Check if the child process is still alive.

        Returns:
            True if a child was started and has not exited yet
        """
        process = self._process
        return process is not None and process.poll() is None

    def start(self, script_path: str, env_overrides: Optional[Dict[str, str]] = None) -> subprocess.Popen:
        """
        Spawn the script through the shell interpreter.

        Args:
            script_path: Path of the script passed as the interpreter's argument
            env_overrides: Variables added on top of the inherited environment

        Returns:
            The child process handle

        Raises:
            StartError: If the interpreter cannot be spawned or a child is already running
        """
        command = [self.shell_path or "", script_path]
        command_str = " ".join(command)

        with self._lock:
            if self.is_running():
                raise StartError(f"Process already running (PID {self._process.pid})", command)
            if not self.shell_path:
                raise StartError("No shell interpreter available to run the script", command)

            process_env = os.environ.copy()
            if env_overrides:
                process_env.update(env_overrides)

            self.logger.info(f"Starting installation script: {command_str}")
            try:
                process = subprocess.Popen(
                    command,
                    stdin=subprocess.DEVNULL,
                    stdout=subprocess.PIPE,
                    stderr=subprocess.PIPE,
                    env=process_env,
                )
            except (OSError, ValueError) as e:
                self.logger.error(f"Failed to start '{command_str}': {e}")
                raise StartError(f"Failed to start '{command_str}': {e}", command) from e

            self._generation += 1
            generation = self._generation
            exit_queued = threading.Event()
            self._process = process
            self._exit_queued = exit_queued

            readers = [
                threading.Thread(target=self._pump, args=(process.stdout, StdoutChunk, generation), daemon=True),
                threading.Thread(target=self._pump, args=(process.stderr, StderrChunk, generation), daemon=True),
            ]
            for reader in readers:
                reader.start()
            threading.Thread(
                target=self._await_exit, args=(process, readers, exit_queued, generation), daemon=True
            ).start()

        self.logger.info(f"Installation script started with PID {process.pid}")
        return process

    def stop(self, timeout: float = 10) -> bool:
        """
        Kill the running child and all of its descendants, then wait for it.

        Args:
            timeout: Seconds to wait for the output readers to drain after the kill

        Returns:
            True if a running process was stopped, False if nothing was running
        """
        with self._lock:
            process = self._process
            if process is None or process.poll() is not None:
                return False

            # Collect the tree before killing; the shell goes first so it cannot
            # observe a dead child and exit on its own with 128+SIGKILL
            try:
                parent = psutil.Process(process.pid)
                tree = [parent] + parent.children(recursive=True)
            except (psutil.NoSuchProcess, psutil.AccessDenied):
                tree = []

            self.logger.info(f"Killing installation process tree ({len(tree) or 1} processes, PID {process.pid})")
            for proc in tree:
                try:
                    proc.kill()
                except (psutil.NoSuchProcess, psutil.AccessDenied):
                    continue  # Already gone or not ours
            if not tree:
                try:
                    process.kill()
                except ProcessLookupError:
                    pass

            exit_code = process.wait()
            exit_queued = self._exit_queued

        if not exit_queued.wait(timeout):
            self.logger.warning("Output streams still open after kill; a descendant may have escaped")
        self.logger.info(f"Installation process stopped (exit status {exit_code})")
        return True

    def wait(self, timeout: Optional[float] = None) -> bool:
        """
        Block until the current child's exit event has been queued.

        Args:
            timeout: Seconds to wait, None for no limit

        Returns:
            True if the exit event is queued (or no child was ever started)
        """
        return self._exit_queued.wait(timeout)

    # ------------------------------------------------------------------
    # Event delivery
    # ------------------------------------------------------------------

    def dispatch_pending(self, max_events: Optional[int] = None) -> int:
        """
        Deliver queued events to listeners on the calling thread.
        Events left over from an earlier child are discarded once a new one
        has been started.

        Args:
            max_events: Upper bound on events delivered in this call

        Returns:
            Number of events delivered
        """
        delivered = 0
        while max_events is None or delivered < max_events:
            try:
                generation, event = self._events.get_nowait()
            except queue.Empty:
                break
            if generation != self._generation:
                self.logger.debug(f"Dropping {type(event).__name__} from a previous installation process")
                continue
            delivered += 1
            for listener in list(self._listeners):
                try:
                    self._deliver(listener, event)
                except Exception:
                    self.logger.exception(f"Listener {listener!r} failed handling {type(event).__name__}")
        return delivered

    @staticmethod
    def _deliver(listener: ProcessListener, event: ProcessEvent) -> None:
        if isinstance(event, StdoutChunk):
            listener.on_stdout_chunk(event.data)
        elif isinstance(event, StderrChunk):
            listener.on_stderr_chunk(event.data)
        elif isinstance(event, ProcessExited):
            listener.on_exit(event.exit_code, event.crashed)

    def _pump(self, stream, event_type, generation: int) -> None:
        """Reader thread: one per stream, preserves emission order within it."""
        try:
            for chunk in iter(stream.readline, b""):
                self._events.put((generation, event_type(chunk)))
        except (OSError, ValueError) as e:
            self.logger.debug(f"Output reader stopped: {e}")
        finally:
            stream.close()

    def _await_exit(self, process: subprocess.Popen, readers: List[threading.Thread],
                    exit_queued: threading.Event, generation: int) -> None:
        """Waiter thread: queue the exit event once both streams hit EOF."""
        for reader in readers:
            reader.join()
        exit_code = process.wait()
        # Negative return code means the child was terminated by a signal
        crashed = exit_code < 0
        self.logger.info(f"Installation process exited: code={exit_code} crashed={crashed}")
        self._events.put((generation, ProcessExited(exit_code, crashed)))
        exit_queued.set()
