"""pyopto22: cached, write-through access to controller strategy variables over REST."""

__version__ = "0.1.0"

from .accessor import VariableNamespace
from .categories import CategoryMap, get_default_category_map
from .controller import PACController
from .error_log import ErrorLog
from .errors import (
    BlankParameterError,
    ErrorKind,
    InvalidTableOwnerError,
    InvalidValueError,
    NoPrefixError,
    PyOpto22Error,
    ReadOnlyError,
    RemoteError,
    UnknownPrefixError,
    UnknownVariableError,
)
from .prefixes import PrefixTable, extract_prefix
from .table import OptoTable
from .types import BaseType, Category, DeviceInfo, ExplainInfo, RequestLog, StrategyInfo

__all__ = [
    "__version__",
    "PACController",
    "OptoTable",
    "VariableNamespace",
    "CategoryMap",
    "get_default_category_map",
    "ErrorLog",
    "PrefixTable",
    "extract_prefix",
    "BlankParameterError",
    "ErrorKind",
    "InvalidTableOwnerError",
    "InvalidValueError",
    "NoPrefixError",
    "PyOpto22Error",
    "ReadOnlyError",
    "RemoteError",
    "UnknownPrefixError",
    "UnknownVariableError",
    "BaseType",
    "Category",
    "DeviceInfo",
    "ExplainInfo",
    "RequestLog",
    "StrategyInfo",
]
