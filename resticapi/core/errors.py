"""
ResticAPI - Error taxonomy
Every failure the bridge can report, each one mapped to an HTTP status.
"""


class ResticApiError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigError(ResticApiError):
    """Configuration file missing, unreadable or invalid. Fatal at startup."""


class CredentialMaterializationError(ResticApiError):
    """The password file could not be created or written."""


class ToolExecutionError(ResticApiError):
    """The restic process could not be started at all."""


class ToolTimeoutError(ToolExecutionError):
    """The restic process exceeded the configured timeout and was killed."""


class ToolReportedError(ResticApiError):
    """restic ran and exited with a nonzero status."""


class OutputDecodingError(ResticApiError):
    """stdout was not valid UTF-8 or not valid JSON."""


class ValidationError(ResticApiError):
    """A caller-supplied field failed a precondition."""

    status_code = 400
