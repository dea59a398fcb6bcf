"""
Failure taxonomy for an installation run.
Every error here is terminal for the run; nothing is retried.
"""


class InstallerError(Exception):
    """Base class for installation run failures."""


class StartError(InstallerError):
    """The shell interpreter could not be launched."""

    def __init__(self, message, command=None):
        super().__init__(message)
        self.command = command or []


class ProcessCrash(InstallerError):
    """The script was terminated abnormally (e.g. killed by a signal)."""

    def __init__(self, exit_code):
        super().__init__(f"Installation process crashed (exit status {exit_code})")
        self.exit_code = exit_code


class NonZeroExit(InstallerError):
    """The script ran to completion but reported failure."""

    def __init__(self, exit_code):
        super().__init__(f"Installation failed with exit code {exit_code}")
        self.exit_code = exit_code
