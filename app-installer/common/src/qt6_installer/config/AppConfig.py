import os

from qt6_installer.core.platform_utils import PlatformUtils


class AppConfig:
    """
    Runtime settings for the installer front-end.
    Resolved once from defaults plus environment overrides; nothing is persisted.
    """

    _instance = None

    ENV_SHELL = "QT6_INSTALLER_SHELL"
    ENV_LOG_DIR = "QT6_INSTALLER_LOG_DIR"
    ENV_SCRIPT_DIR = "QT6_INSTALLER_SCRIPT_DIR"
    ENV_POLL_MS = "QT6_INSTALLER_POLL_MS"

    DEFAULT_POLL_MS = 50
    WINDOW_TITLE = "Qt6 Cross-Compilation Installer for macOS"
    QML_ENV_VAR = "BUILD_QML"

    def __new__(cls):
        if not cls._instance:
            cls._instance = super(AppConfig, cls).__new__(cls)
            cls._instance._initialize()
        return cls._instance

    def _initialize(self):
        if not hasattr(self, "shell_path"):  # Prevent reinitialization
            self.shell_path = os.environ.get(self.ENV_SHELL) or PlatformUtils.get_default_shell()
            self.log_dir = os.environ.get(self.ENV_LOG_DIR) or os.path.join(
                PlatformUtils.get_executable_directory(), "logs"
            )
            self.script_dir = os.environ.get(self.ENV_SCRIPT_DIR) or str(PlatformUtils.get_home_directory())
            self.poll_interval_ms = self._parse_poll_interval(os.environ.get(self.ENV_POLL_MS))
            self.build_qml_default = False

    @classmethod
    def _parse_poll_interval(cls, raw):
        if not raw:
            return cls.DEFAULT_POLL_MS
        try:
            value = int(raw)
        except ValueError:
            return cls.DEFAULT_POLL_MS
        return value if value > 0 else cls.DEFAULT_POLL_MS

    @classmethod
    def reset_instance(cls):
        """Drop the cached singleton so the next access re-reads the environment."""
        cls._instance = None

    @staticmethod
    def qml_env_value(build_qml):
        """Value passed to the script for the QML toggle."""
        return "y" if build_qml else "n"

    def get_system_info(self):
        """
        Get system and configuration information for diagnostics.
        """
        config_info = {
            'shell_path': self.shell_path or 'not found',
            'log_dir': self.log_dir,
            'script_dir': self.script_dir,
            'poll_interval_ms': str(self.poll_interval_ms),
        }
        return {**PlatformUtils.get_system_info(), **config_info}

    def __str__(self):
        return (
            f"Shell: {self.shell_path}\n"
            f"Log Directory: {self.log_dir}\n"
            f"Script Directory: {self.script_dir}\n"
            f"Poll Interval: {self.poll_interval_ms} ms\n"
            f"OS Type: {PlatformUtils.get_os_type()}\n"
        )
