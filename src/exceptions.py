"""
Exceptions raised by the ghmtools operations.

Only the entry point (ghmtools.py) turns these into exit statuses.

@Date: 2025-06-02

"""


class GhmToolsError(Exception):
    """Base class for every error reported by ghmtools."""

    exit_status = 1


class UsageError(GhmToolsError):
    """Bad flag or argument shape."""


class ValidationError(GhmToolsError):
    """Out-of-range value, missing or wrong-type file, unsupported genome."""


class OverwriteDeclined(GhmToolsError):
    """The user chose not to overwrite an existing output file. Not a failure."""

    exit_status = 0


class ExternalToolFailure(GhmToolsError):
    """
    An external program finished with a non-zero status or could not be started.

    The exit status of ghmtools is the return code of the failed program.
    """

    def __init__(self, tool, returncode, message=None):
        self.tool = tool
        self.returncode = returncode
        if message is None:
            message = f"{tool} failed with exit code {returncode}"
        super().__init__(message)

    @property
    def exit_status(self):
        return self.returncode
