"""
Cross-platform helpers for the Qt6 Installer front-end.
Handles OS detection, executable/home directory lookup and shell discovery.
"""

import os
import sys
import platform
import shutil
from pathlib import Path
from typing import Dict, Optional


class PlatformUtils:
    """Utility class for cross-platform operations."""

    @staticmethod
    def get_os_type() -> str:
        """
        Returns the operating system type.

        Returns:
            str: 'windows', 'macos', or 'linux'
        """
        system = platform.system().lower()
        if system == 'windows':
            return 'windows'
        elif system == 'darwin':
            return 'macos'
        else:
            # Default to linux for other Unix-like systems
            return 'linux'

    @staticmethod
    def get_home_directory() -> Path:
        """
        Get the user's home directory in a cross-platform way.

        Returns:
            Path: User's home directory path
        """
        return Path.home()

    @staticmethod
    def get_executable_directory() -> str:
        """
        Determine the directory containing the running executable or script.

        Returns:
            str: Absolute path to the executable directory.
        """
        if getattr(sys, "frozen", False):
            # PyInstaller executable
            return os.path.dirname(sys.executable)

        executable_path = os.path.abspath(sys.argv[0]) if sys.argv and sys.argv[0] else os.getcwd()
        if os.path.isdir(executable_path):
            return executable_path
        return os.path.dirname(executable_path)

    @staticmethod
    def get_default_shell() -> Optional[str]:
        """
        Get the shell interpreter used to run installation scripts.

        Returns:
            Optional[str]: Shell path, or None when no bash is available (Windows)
        """
        if PlatformUtils.get_os_type() == 'windows':
            return shutil.which('bash')
        return '/bin/bash'

    @staticmethod
    def is_executable_file(path: str) -> bool:
        """
        Check whether a path points to an existing, executable regular file.

        Args:
            path: Filesystem path to check

        Returns:
            bool: True if the file exists and can be executed
        """
        if not path:
            return False
        return os.path.isfile(path) and os.access(path, os.X_OK)

    @staticmethod
    def get_system_info() -> Dict[str, str]:
        """
        Get basic system information for diagnostics.

        Returns:
            Dict[str, str]: System information dictionary
        """
        return {
            'os_type': PlatformUtils.get_os_type(),
            'platform': platform.platform(),
            'architecture': platform.architecture()[0],
            'machine': platform.machine(),
            'python_version': platform.python_version(),
            'home_directory': str(PlatformUtils.get_home_directory()),
            'default_shell': PlatformUtils.get_default_shell() or 'not found',
        }
