"""
Tests for installer_controller.py: the Idle/Running state machine behind the window.
"""

from unittest.mock import Mock, call

import pytest

from qt6_installer.core.errors import StartError
from qt6_installer.core.installation_run import RunStatus
from qt6_installer.core.installer_controller import STATUS_READY, InstallerController
from qt6_installer.core.output_classifier import Category, Stream
from qt6_installer.core.process_manager import ProcessSupervisor

WAIT_TIMEOUT = 15


@pytest.fixture
def fake_supervisor():
    supervisor = Mock(spec=ProcessSupervisor)
    supervisor.is_running.return_value = True
    return supervisor


@pytest.fixture
def controller(mock_view, fake_supervisor, test_logger, make_script):
    controller = InstallerController(mock_view, supervisor=fake_supervisor, logger=test_logger)
    controller.select_script(make_script("exit 0"))
    return controller


def _texts(view):
    return [line.text for line in view.logged_lines]


def _last_controls_state(view):
    return view.set_controls_running.call_args_list[-1] == call(False)


@pytest.mark.unit
class TestScriptSelection:

    def test_start_without_script_warns_and_stays_idle(self, mock_view, fake_supervisor, test_logger):
        controller = InstallerController(mock_view, supervisor=fake_supervisor, logger=test_logger)
        assert controller.start() is False
        mock_view.show_warning.assert_called_once_with("No Script", "Please select install.sh first!")
        fake_supervisor.start.assert_not_called()
        mock_view.set_controls_running.assert_not_called()

    def test_select_missing_file_is_rejected(self, mock_view, fake_supervisor, test_logger, tmp_path):
        controller = InstallerController(mock_view, supervisor=fake_supervisor, logger=test_logger)
        assert controller.select_script(str(tmp_path / "missing.sh")) is False
        assert controller.script_path is None
        mock_view.set_start_enabled.assert_not_called()

    def test_select_existing_file_enables_start(self, controller, mock_view):
        assert controller.script_path.endswith("install.sh")
        mock_view.set_script_path.assert_called_once_with(controller.script_path)
        mock_view.set_start_enabled.assert_called_once_with(True)


@pytest.mark.unit
class TestRunLifecycle:

    def test_start_writes_banner_and_passes_qml_flag(self, controller, mock_view, fake_supervisor):
        controller.set_build_qml(True)
        assert controller.start() is True

        fake_supervisor.start.assert_called_once_with(controller.script_path, {"BUILD_QML": "y"})
        mock_view.clear_log.assert_called_once()
        mock_view.set_controls_running.assert_called_with(True)
        assert _texts(mock_view) == [
            "=== Starting Qt6 Installation ===",
            f"Script: {controller.script_path}",
            "QML Support: Yes",
        ]
        assert mock_view.logged_lines[0].category == Category.BANNER
        assert controller.is_running

    def test_qml_off_passes_n(self, controller, fake_supervisor):
        controller.start()
        fake_supervisor.start.assert_called_once_with(controller.script_path, {"BUILD_QML": "n"})

    def test_start_error_resets_to_idle(self, controller, mock_view, fake_supervisor):
        fake_supervisor.start.side_effect = StartError("no interpreter")
        assert controller.start() is False

        assert _texts(mock_view)[-1] == "ERROR: Failed to start installation process!"
        assert mock_view.logged_lines[-1].category == Category.ERROR
        assert _last_controls_state(mock_view)
        assert controller.run.status == RunStatus.FAILED
        assert not controller.is_running
        mock_view.show_error.assert_not_called()

    def test_stdout_is_classified_and_raises_progress(self, controller, mock_view):
        controller.start()
        controller.on_stdout_chunk(b"[INFO] Configuring Qt6 host\n")

        assert mock_view.logged_lines[-1].category == Category.INFO
        mock_view.set_progress.assert_called_with(20)
        mock_view.set_status.assert_called_with("Progress: 20%")

    def test_mixed_chunk_yields_two_lines(self, controller, mock_view):
        controller.start()
        controller.on_stdout_chunk(b"Error: something failed\n[SUCCESS] done\n")
        assert [(line.text, line.category) for line in mock_view.logged_lines[-2:]] == [
            ("Error: something failed", Category.ERROR),
            ("[SUCCESS] done", Category.SUCCESS),
        ]

    def test_progress_only_rendered_when_it_rises(self, controller, mock_view):
        controller.start()
        controller.on_stdout_chunk(b"Qt6 source already exists\n")
        controller.on_stdout_chunk(b"Setting up llvm-mingw...\n")
        controller.on_stdout_chunk(b"nothing to see\n")
        progress_calls = [c.args[0] for c in mock_view.set_progress.call_args_list]
        assert progress_calls == [0, 15]
        assert controller.run.progress == 15

    def test_stderr_rendered_without_progress(self, controller, mock_view):
        controller.start()
        controller.on_stderr_chunk(b"Installation Complete\n")
        assert mock_view.logged_lines[-1].stream == Stream.STDERR
        assert controller.run.progress == 0

    def test_invalid_utf8_is_replaced(self, controller, mock_view):
        controller.start()
        controller.on_stdout_chunk(b"caf\xe9 Building\n")
        assert mock_view.logged_lines[-1].text == "caf\ufffd Building"

    def test_exit_code_one_shows_failure_and_returns_to_idle(self, controller, mock_view):
        controller.start()
        controller.on_exit(1, False)

        mock_view.show_error.assert_called_once_with(
            "Installation Failed",
            "Installation failed with exit code 1\nCheck the output for details.",
        )
        assert _texts(mock_view)[-1] == "=== Installation failed with exit code 1 ==="
        assert _last_controls_state(mock_view)
        mock_view.set_status.assert_called_with(STATUS_READY)
        assert controller.run.status == RunStatus.FAILED

    def test_crash_shows_crash_dialog(self, controller, mock_view):
        controller.start()
        controller.on_exit(-9, True)
        assert _texts(mock_view)[-1] == "=== Process crashed ==="
        assert mock_view.show_error.call_args.args[0] == "Process Crashed"
        assert _last_controls_state(mock_view)

    def test_success_sets_progress_to_100(self, controller, mock_view):
        controller.start()
        controller.on_stdout_chunk(b"Building Qt6 Windows base\n")
        controller.on_exit(0, False)

        mock_view.set_progress.assert_called_with(100)
        mock_view.show_info.assert_called_once_with("Success", "Qt6 installation completed successfully!")
        assert _texts(mock_view)[-1] == "=== Installation completed successfully! ==="
        assert mock_view.logged_lines[-1].category == Category.SUCCESS
        assert controller.run.status == RunStatus.FINISHED

    def test_watermark_resets_between_runs(self, controller, mock_view):
        controller.start()
        controller.on_stdout_chunk(b"Installing Qt6 Windows\n")
        controller.on_exit(0, False)

        controller.start()
        assert controller.run.progress == 0
        controller.on_stdout_chunk(b"Checking prerequisites...\n")
        assert controller.run.progress == 5
        mock_view.set_progress.assert_called_with(5)

    def test_user_stop_suppresses_exit_dialog(self, controller, mock_view, fake_supervisor):
        controller.start()
        controller.stop()

        fake_supervisor.stop.assert_called_once()
        assert _texts(mock_view)[-2:] == ["=== Stopping installation... ===", "Installation stopped by user."]
        assert controller.run.status == RunStatus.STOPPED

        controller.on_exit(-9, True)
        mock_view.show_error.assert_not_called()
        mock_view.show_info.assert_not_called()
        assert _last_controls_state(mock_view)

    def test_stop_when_idle_only_resets_controls(self, controller, mock_view, fake_supervisor):
        fake_supervisor.is_running.return_value = False
        controller.stop()
        fake_supervisor.stop.assert_not_called()
        assert _last_controls_state(mock_view)
        assert mock_view.logged_lines == []

    def test_second_start_while_running_is_ignored(self, controller, fake_supervisor):
        controller.start()
        assert controller.start() is False
        assert fake_supervisor.start.call_count == 1

    def test_output_after_stop_is_ignored(self, controller, mock_view):
        controller.start()
        controller.stop()
        count = len(mock_view.logged_lines)
        controller.on_stdout_chunk(b"late output\n")
        assert len(mock_view.logged_lines) == count

    def test_shutdown_while_running_stops_child(self, controller, fake_supervisor):
        controller.start()
        controller.shutdown()
        fake_supervisor.stop.assert_called_once()
        fake_supervisor.remove_listener.assert_called_once_with(controller)
        assert controller.run.status == RunStatus.STOPPED


@pytest.mark.integration
class TestWithRealProcess:

    def _controller(self, mock_view, test_logger, script):
        supervisor = ProcessSupervisor(logger=test_logger)
        controller = InstallerController(mock_view, supervisor=supervisor, logger=test_logger)
        controller.select_script(script)
        return controller, supervisor

    def test_failed_script_end_to_end(self, mock_view, test_logger, make_script):
        script = make_script('echo "[INFO] Checking prerequisites..."\necho "[ERROR] CMake not found" \nexit 1')
        controller, supervisor = self._controller(mock_view, test_logger, script)

        assert controller.start() is True
        assert supervisor.wait(WAIT_TIMEOUT)
        controller.poll()

        assert "[ERROR] CMake not found" in _texts(mock_view)
        assert controller.run.progress == 5
        mock_view.show_error.assert_called_once()
        assert mock_view.show_error.call_args.args[0] == "Installation Failed"
        assert _last_controls_state(mock_view)

    def test_successful_script_end_to_end(self, mock_view, test_logger, make_script):
        script = make_script(
            'echo "[INFO] Building Qt6 host tools for macOS..."\n'
            'echo "=== Installation Complete ==="\n'
            'exit 0'
        )
        controller, supervisor = self._controller(mock_view, test_logger, script)

        controller.start()
        assert supervisor.wait(WAIT_TIMEOUT)
        controller.poll()

        assert controller.run.status == RunStatus.FINISHED
        assert controller.run.progress == 100
        mock_view.show_info.assert_called_once()

    def test_restart_after_stop_keeps_new_run_running(self, mock_view, test_logger, make_script):
        controller, supervisor = self._controller(mock_view, test_logger, make_script("sleep 30\necho never"))
        try:
            controller.start()
            first_run = controller.run
            controller.stop()
            assert first_run.status == RunStatus.STOPPED

            assert controller.start() is True
            controller.poll()

            assert controller.run is not first_run
            assert controller.run.status == RunStatus.RUNNING
            assert controller.is_running
            assert supervisor.is_running()
            mock_view.show_error.assert_not_called()
            mock_view.show_info.assert_not_called()
            assert mock_view.set_controls_running.call_args_list[-1] == call(True)
            assert "=== Process crashed ===" not in _texts(mock_view)
        finally:
            controller.shutdown()

    def test_shutdown_kills_running_script(self, mock_view, test_logger, make_script):
        controller, supervisor = self._controller(mock_view, test_logger, make_script("sleep 30"))
        controller.start()
        assert supervisor.is_running()

        controller.shutdown()
        assert not supervisor.is_running()
        controller.shutdown()
