"""
Logging configuration for the Qt6 Installer front-end.
Provides both console and file logging so a failed build can be diagnosed later.
"""

import logging
import os
import platform
import sys
from datetime import datetime
from pathlib import Path

import psutil

from qt6_installer.config.AppConfig import AppConfig

LOGGER_NAME = 'Qt6Installer'


class InstallerLogger:
    """Centralized logging for the Qt6 Installer."""

    def __init__(self, log_dir=None):
        if log_dir is None:
            log_dir = AppConfig().log_dir

        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)

        # Create timestamped log file
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        self.log_file = self.log_dir / f"qt6_installer_{timestamp}.log"

        self.setup_logging()

    def setup_logging(self):
        """Configure logging with both file and console handlers."""
        self.logger = logging.getLogger(LOGGER_NAME)
        self.logger.setLevel(logging.DEBUG)

        # Clear any existing handlers
        for handler in list(self.logger.handlers):
            handler.close()
        self.logger.handlers.clear()

        detailed_formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
        )
        simple_formatter = logging.Formatter('%(levelname)s: %(message)s')

        # File handler (detailed logging, includes every script line)
        file_handler = logging.FileHandler(self.log_file, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(detailed_formatter)
        self.logger.addHandler(file_handler)

        # Console handler (simple logging)
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.INFO)
        console_handler.setFormatter(simple_formatter)
        self.logger.addHandler(console_handler)

        self.logger.info(f"Qt6 Installer logging started - Log file: {self.log_file}")

    def get_logger(self):
        """Get the configured logger instance."""
        return self.logger

    def log_system_info(self):
        """Log system information for debugging."""
        self.logger.info("=== SYSTEM INFORMATION ===")
        self.logger.info(f"Platform: {platform.platform()}")
        self.logger.info(f"Python: {sys.version}")
        self.logger.info(f"Architecture: {platform.architecture()}")
        self.logger.info(f"CPU Count: {psutil.cpu_count()}")
        self.logger.info(f"Memory: {psutil.virtual_memory().total / (1024**3):.1f} GB")
        self.logger.info(f"Current working directory: {os.getcwd()}")

        for key, value in AppConfig().get_system_info().items():
            self.logger.info(f"Config {key}: {value}")

        # The build script inherits this environment
        for var in ['PATH', 'SHELL', AppConfig.QML_ENV_VAR]:
            value = os.environ.get(var, 'Not set')
            self.logger.info(f"Environment {var}: {value}")

        self.logger.info("=== END SYSTEM INFORMATION ===")

    def get_log_file_path(self):
        """Get the path to the current log file."""
        return str(self.log_file)


# Global logger instance
_installer_logger = None


def get_installer_logger():
    """Get the global installer logger instance."""
    global _installer_logger
    if _installer_logger is None:
        _installer_logger = InstallerLogger()
        _installer_logger.log_system_info()
    return _installer_logger.get_logger()


def get_log_file_path():
    """Get the path to the current log file."""
    global _installer_logger
    if _installer_logger is None:
        _installer_logger = InstallerLogger()
    return _installer_logger.get_log_file_path()
