from typing import NamedTuple

from dcm.libs.classes.errors import DcmError


class Result(NamedTuple):
    code: int = 0
    error: DcmError | None = None

    @property
    def is_hard(self) -> bool:
        return self.code != 0

    @property
    def is_soft(self) -> bool:
        return self.code == 0 and self.error is not None

    @classmethod
    def ok(cls) -> "Result":
        return cls(0, None)

    @classmethod
    def soft(cls, error: DcmError | str) -> "Result":
        return cls(0, error if isinstance(error, DcmError) else DcmError(error))

    @classmethod
    def hard(cls, error: DcmError | str, code: int = 1) -> "Result":
        return cls(code, error if isinstance(error, DcmError) else DcmError(error))
