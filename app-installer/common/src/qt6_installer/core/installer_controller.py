"""
Installer Controller: wires user actions to the Process Supervisor and renders
classifier/estimator results through a view.

The view is anything exposing the methods used below (the Tk window in
production, a Mock in tests). All calls happen on the UI thread.
"""

import os
from typing import Optional

from qt6_installer.config.AppConfig import AppConfig
from qt6_installer.core.errors import ProcessCrash, StartError
from qt6_installer.core.installation_run import InstallationRun
from qt6_installer.core.installer_logger import get_installer_logger
from qt6_installer.core.output_classifier import Category, LogLine, shell_line
from qt6_installer.core.platform_utils import PlatformUtils
from qt6_installer.core.process_manager import ProcessListener, ProcessSupervisor

STATUS_READY = "Ready"
STATUS_READY_TO_INSTALL = "Ready to install"
STATUS_RUNNING = "Installing..."


def decode_output(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


class InstallerController(ProcessListener):
    """Idle/Running state machine for the installer window."""

    def __init__(self, view, supervisor: Optional[ProcessSupervisor] = None, logger=None):
        self.view = view
        self.logger = logger or get_installer_logger()
        self.supervisor = supervisor or ProcessSupervisor(logger=self.logger)
        self.supervisor.add_listener(self)
        self.script_path: Optional[str] = None
        self.build_qml = AppConfig().build_qml_default
        self.run: Optional[InstallationRun] = None
        self._shown_progress = 0

    @property
    def is_running(self) -> bool:
        return self.run is not None and self.run.is_active

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------

    def select_script(self, path: str) -> bool:
        """Accept a script chosen in the file dialog; only existence is checked."""
        if not path or not os.path.isfile(path):
            self.logger.warning(f"Ignoring script selection, not a file: {path!r}")
            return False
        self.script_path = os.path.abspath(path)
        self.logger.info(f"Selected installation script: {self.script_path}")
        if not PlatformUtils.is_executable_file(self.script_path):
            self.logger.debug("Script is not executable; it is passed to the shell as an argument")
        self.view.set_script_path(self.script_path)
        self.view.set_start_enabled(True)
        return True

    def set_build_qml(self, enabled: bool) -> None:
        self.build_qml = bool(enabled)

    def start(self) -> bool:
        """Start a run. Returns True once the child process is up."""
        if self.is_running:
            self.logger.warning("Start requested while an installation is already running")
            return False
        if not self.script_path:
            self.view.show_warning("No Script", "Please select install.sh first!")
            return False

        self.run = InstallationRun(self.script_path, self.build_qml)
        self._shown_progress = 0
        self.view.set_controls_running(True)
        self.view.clear_log()
        self.view.set_progress(0)
        self.view.set_status(STATUS_RUNNING)
        self._write(shell_line("=== Starting Qt6 Installation ===", Category.BANNER))
        self._write(shell_line(f"Script: {self.script_path}", Category.PLAIN))
        self._write(shell_line(f"QML Support: {'Yes' if self.build_qml else 'No'}", Category.PLAIN))

        env = {AppConfig.QML_ENV_VAR: AppConfig.qml_env_value(self.build_qml)}
        try:
            self.supervisor.start(self.script_path, env)
        except StartError as e:
            self.logger.error(f"Could not start installation: {e}")
            self._write(shell_line("ERROR: Failed to start installation process!", Category.ERROR))
            self.run.fail_to_start(e)
            self._reset_controls()
            return False
        return True

    def stop(self) -> None:
        """User-requested stop. Always leaves the controls idle."""
        if self.is_running and self.supervisor.is_running():
            self._write(shell_line("=== Stopping installation... ===", Category.ERROR))
            self.supervisor.stop()
            self._write(shell_line("Installation stopped by user.", Category.ERROR))
            self.logger.info("Installation stopped by user")
        if self.is_running:
            self.run.mark_stopped()
        self._reset_controls()

    def shutdown(self) -> None:
        """Window teardown: never leave the child running behind us."""
        if self.supervisor.is_running():
            self.logger.info("Window closing while installation is running, killing it")
            self.supervisor.stop()
            if self.is_running:
                self.run.mark_stopped()
        self.supervisor.remove_listener(self)

    def poll(self) -> int:
        """Deliver pending process events; called from the UI event loop."""
        return self.supervisor.dispatch_pending()

    # ------------------------------------------------------------------
    # Process events
    # ------------------------------------------------------------------

    def on_stdout_chunk(self, data: bytes) -> None:
        if not self.is_running:
            return
        text = decode_output(data)
        lines = self.run.ingest_stdout(text)
        for line in lines:
            self.logger.debug(f"[stdout] {line.text}")
        self.view.append_log_lines(lines)
        self._render_progress()

    def on_stderr_chunk(self, data: bytes) -> None:
        if not self.is_running:
            return
        lines = self.run.ingest_stderr(decode_output(data))
        for line in lines:
            self.logger.debug(f"[stderr] {line.text}")
        self.view.append_log_lines(lines)

    def on_exit(self, exit_code: int, crashed: bool) -> None:
        if not self.is_running:
            # Exit that follows a user stop or a shutdown
            return

        failure = self.run.finish(exit_code, crashed)
        if isinstance(failure, ProcessCrash):
            self.logger.error(f"Installation process crashed (exit status {exit_code})")
            self._write(shell_line("=== Process crashed ===", Category.ERROR))
            self.view.show_error(
                "Process Crashed",
                "The installation process terminated abnormally.\nCheck the output for details.",
            )
        elif failure is not None:
            self.logger.error(f"Installation failed with exit code {exit_code}")
            self._write(shell_line(f"=== Installation failed with exit code {exit_code} ===", Category.ERROR))
            self.view.show_error(
                "Installation Failed",
                f"Installation failed with exit code {exit_code}\nCheck the output for details.",
            )
        else:
            self.logger.info(f"Installation completed successfully in {self.run.elapsed_seconds:.0f}s")
            self._write(shell_line("=== Installation completed successfully! ===", Category.SUCCESS))
            self._render_progress()
            self.view.show_info("Success", "Qt6 installation completed successfully!")

        self._reset_controls()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _write(self, line: LogLine) -> None:
        if self.run is not None:
            self.run.append(line)
        self.view.append_log_lines([line])

    def _render_progress(self) -> None:
        progress = self.run.progress
        if progress > self._shown_progress:
            self._shown_progress = progress
            self.view.set_progress(progress)
            self.view.set_status(f"Progress: {progress}%")

    def _reset_controls(self) -> None:
        self.view.set_controls_running(False)
        self.view.set_status(STATUS_READY)
