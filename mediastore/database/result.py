"""Outcome of non-fatal database operations."""

from dataclasses import dataclass

from mediastore.types import ResultStatus


@dataclass(frozen=True)
class OperationResult:
    """Result of an operation whose failure must not abort the caller.

    Schema operations report failures here instead of raising, so startup can
    continue with a partially available schema.
    """

    status: ResultStatus
    message: str = ""
    error: BaseException | None = None

    @classmethod
    def ok(cls, message: str = "") -> "OperationResult":
        return cls(ResultStatus.OK, message)

    @classmethod
    def ignored(cls, message: str = "", error: BaseException | None = None) -> "OperationResult":
        return cls(ResultStatus.IGNORED, message, error)

    @classmethod
    def failed(cls, error: BaseException, message: str = "") -> "OperationResult":
        return cls(ResultStatus.FAILED, message or str(error), error)

    @property
    def is_ok(self) -> bool:
        return self.status == ResultStatus.OK

    @property
    def is_failed(self) -> bool:
        return self.status == ResultStatus.FAILED

    def __bool__(self) -> bool:
        return self.status != ResultStatus.FAILED
