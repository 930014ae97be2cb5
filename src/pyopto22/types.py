"""Core data model: variable categories, request log, device and strategy metadata."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class BaseType(str, Enum):
    """Value type a category holds locally."""

    INTEGER = "integer"
    FLOAT = "float"
    STRING = "string"
    BOOLEAN = "boolean"


class Category(str, Enum):
    """Variable categories exposed by the controller's REST interface."""

    ANALOG_INPUT = "analog_input"
    ANALOG_OUTPUT = "analog_output"
    BOOLEAN = "boolean"
    BOOLEAN_TABLE = "boolean_table"
    DIGITAL_INPUT = "digital_input"
    DIGITAL_OUTPUT = "digital_output"
    DOWN_TIMER = "down_timer"
    FLOAT = "float"
    FLOAT_TABLE = "float_table"
    INTEGER = "integer"
    INTEGER_TABLE = "integer_table"
    STRING = "string"
    STRING_TABLE = "string_table"
    UP_TIMER = "up_timer"

    @property
    def base_type(self) -> BaseType:
        return _TRAITS[self].base_type

    @property
    def is_table(self) -> bool:
        return _TRAITS[self].is_table

    @property
    def read_only(self) -> bool:
        return _TRAITS[self].read_only

    @property
    def write_suffix(self) -> str:
        """Sub-path appended to the variable path on scalar writes ('' for none)."""
        return _TRAITS[self].write_suffix


@dataclass(frozen=True)
class CategoryTraits:
    """Static traits of a category; endpoints live in CategoryMap."""

    base_type: BaseType
    is_table: bool = False
    read_only: bool = False
    write_suffix: str = ""


_TRAITS: dict[Category, CategoryTraits] = {
    Category.ANALOG_INPUT: CategoryTraits(BaseType.FLOAT, read_only=True),
    Category.ANALOG_OUTPUT: CategoryTraits(BaseType.FLOAT, write_suffix="/eu"),
    Category.BOOLEAN: CategoryTraits(BaseType.BOOLEAN),
    Category.BOOLEAN_TABLE: CategoryTraits(BaseType.BOOLEAN, is_table=True),
    Category.DIGITAL_INPUT: CategoryTraits(BaseType.BOOLEAN, read_only=True),
    Category.DIGITAL_OUTPUT: CategoryTraits(BaseType.BOOLEAN, write_suffix="/state"),
    Category.DOWN_TIMER: CategoryTraits(BaseType.FLOAT, read_only=True),
    Category.FLOAT: CategoryTraits(BaseType.FLOAT),
    Category.FLOAT_TABLE: CategoryTraits(BaseType.FLOAT, is_table=True),
    Category.INTEGER: CategoryTraits(BaseType.INTEGER),
    Category.INTEGER_TABLE: CategoryTraits(BaseType.INTEGER, is_table=True),
    Category.STRING: CategoryTraits(BaseType.STRING),
    Category.STRING_TABLE: CategoryTraits(BaseType.STRING, is_table=True),
    Category.UP_TIMER: CategoryTraits(BaseType.FLOAT, read_only=True),
}

# Local booleans travel as 0/1 on these categories; digital I/O keeps JSON booleans.
WIRE_INTEGER_BOOLEANS = frozenset({Category.BOOLEAN, Category.BOOLEAN_TABLE})


@dataclass(frozen=True)
class ExplainInfo:
    """Result of controller.explain(name): how a variable name is resolved and addressed."""

    name: str
    prefix: str
    category: Category
    base_type: BaseType
    is_table: bool
    read_only: bool
    read_path: str
    write_path: str | None


@dataclass(frozen=True)
class DeviceInfo:
    controller_type: str | None
    firmware_version: str | None
    firmware_timestamp: datetime | None
    mac_1: str | None
    mac_2: str | None
    up_time_seconds: int | None


@dataclass(frozen=True)
class StrategyInfo:
    strategy_name: str | None
    strategy_timestamp: datetime | None
    crc: str | None
    running_charts: int | None


@dataclass
class RequestLog:
    """Append-only request descriptors plus a running request count. Observational only."""

    entries: list[str] = field(default_factory=list)
    count: int = 0

    def record(self, method: str, url: str) -> None:
        self.count += 1
        self.entries.append(f"{method.upper():<4} {url}")

    def note(self, text: str) -> None:
        self.entries.append(text)

    def as_dict(self) -> dict[str, Any]:
        return {"count": self.count, "entries": list(self.entries)}
