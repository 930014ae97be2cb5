"""Clear exceptions for pyopto22: name resolution, validation and REST errors."""

from datetime import datetime
from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Failure taxonomy shared by every pyopto22 exception."""

    BLANK_PARAMETER = "blank_parameter"
    NO_PREFIX = "no_prefix"
    UNKNOWN_PREFIX = "unknown_prefix"
    READ_ONLY = "read_only"
    UNKNOWN_VARIABLE = "unknown_variable"
    INVALID_VALUE = "invalid_value"
    INVALID_TABLE_OWNER = "invalid_table_owner"
    REMOTE_ERROR = "remote_error"


class PyOpto22Error(Exception):
    """Base exception for pyopto22."""

    kind: ErrorKind


class BlankParameterError(PyOpto22Error):
    """Raised when a controller is built without host, username or password."""

    kind = ErrorKind.BLANK_PARAMETER

    def __init__(self, parameter: str) -> None:
        self.parameter = parameter
        super().__init__(f"{parameter.capitalize()} cannot be blank.")


class NoPrefixError(PyOpto22Error):
    """Raised when a variable name does not start with a lowercase prefix."""

    kind = ErrorKind.NO_PREFIX

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Tried accessing variable with no prefix: {name!r}")


class UnknownPrefixError(PyOpto22Error):
    """Raised when a variable prefix is not registered in the prefix table."""

    kind = ErrorKind.UNKNOWN_PREFIX

    def __init__(self, name: str, prefix: str) -> None:
        self.name = name
        self.prefix = prefix
        super().__init__(f"Tried accessing variable with an undefined prefix: {prefix!r} ({name})")


class ReadOnlyError(PyOpto22Error):
    """Raised when a write targets a read-only category (timers, inputs)."""

    kind = ErrorKind.READ_ONLY

    def __init__(self, name: str, category: Any) -> None:
        self.name = name
        self.category = category
        super().__init__(f"Tried to set read-only variable: {getattr(category, 'value', category)}/{name}")


class UnknownVariableError(PyOpto22Error):
    """Raised when a name is not part of the collection fetched from the controller."""

    kind = ErrorKind.UNKNOWN_VARIABLE

    def __init__(self, name: str, category: Any) -> None:
        self.name = name
        self.category = category
        super().__init__(f"Variable not found on controller: {getattr(category, 'value', category)}/{name}")


class InvalidValueError(PyOpto22Error):
    """Raised when a value cannot be validated/cast for the target variable."""

    kind = ErrorKind.INVALID_VALUE

    def __init__(self, name: str, value: Any, message: str | None = None) -> None:
        self.name = name
        self.value = value
        super().__init__(message or f"Tried to set variable to invalid value: {name} = {value!r}")


class InvalidTableOwnerError(PyOpto22Error):
    """Raised when an OptoTable is bound to something other than a PACController."""

    kind = ErrorKind.INVALID_TABLE_OWNER

    def __init__(self, owner: Any) -> None:
        self.owner = owner
        super().__init__(f"Specified an invalid owner for an OptoTable: {type(owner).__name__}")


_STATUS_TYPES: dict[int, str] = {
    400: "Bad Request",
    401: "Authentication Error",
    404: "Not Found",
}


class RemoteError(PyOpto22Error):
    """Raised when a REST request fails (non-success status or connection failure)."""

    kind = ErrorKind.REMOTE_ERROR

    def __init__(
        self,
        method: str,
        url: str,
        *,
        path: str | None = None,
        status: int | None = None,
        cause: BaseException | None = None,
        timestamp: datetime | None = None,
        error_type: str | None = None,
    ) -> None:
        self.method = method
        self.url = url
        self.path = path
        self.status = status
        self.cause = cause
        self.timestamp = timestamp or datetime.now()
        if error_type is not None:
            self.error_type = error_type
        elif status is None:
            self.error_type = "Connection Error"
        else:
            self.error_type = _STATUS_TYPES.get(status, "Unknown Error")
        code = "---" if status is None else str(status)
        self.text = f"{self.timestamp:%m/%d/%y %H:%M:%S} => {code} {self.error_type}: {method} {url}"
        super().__init__(self.text)
