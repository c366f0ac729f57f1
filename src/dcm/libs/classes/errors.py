class DcmError(Exception):
    """Base class for every error reported by dcm."""


class ConfigFileError(DcmError):
    pass


class ConfigShapeError(DcmError):
    """A service entry in the configuration is not a mapping."""


class MissingFieldError(DcmError):
    pass


class NotFoundError(DcmError):
    pass


class CommandError(DcmError):
    """An external command failed to start or exited non-zero.

    The captured output, if any, is trimmed and appended to the reason.
    """

    def __init__(self, reason: str, output: str = "") -> None:
        self.reason = reason
        self.output = output.strip()
        super().__init__(f"{self.reason}: {self.output}" if self.output else self.reason)
