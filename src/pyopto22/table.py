"""OptoTable: fixed-length, index-addressable mirror of one controller table variable."""

import logging
from collections.abc import Iterator, Sequence
from typing import TYPE_CHECKING, Any, overload

from .errors import InvalidTableOwnerError, InvalidValueError, RemoteError
from .types import WIRE_INTEGER_BOOLEANS, Category
from .validate import validate_element, validate_sequence

if TYPE_CHECKING:
    from .controller import PACController

logger = logging.getLogger(__name__)


class OptoTable(Sequence):
    """
    Write-through table bound to a PACController.

    Reads are served from the local mirror. replace() writes the whole table in
    one POST; set_index() (and item assignment) POSTs a single element. A failed
    write leaves the mirror as it was before the call, and the length never
    changes after the table is loaded.
    """

    def __init__(
        self,
        owner: "PACController",
        name: str,
        values: Sequence[Any] | None = None,
        *,
        write: bool = False,
    ) -> None:
        from .controller import PACController

        if not isinstance(owner, PACController):
            raise InvalidTableOwnerError(owner)
        self._owner = owner
        self._name = name
        self._category = owner.category_map.resolve(name)
        if not self._category.is_table:
            raise InvalidValueError(name, values, f"Tried to build a table from non-table variable: {name}")
        self._path = owner.category_map.variable_path(self._category, name)
        self._values: list[Any] = []

        if values is None:
            self._store(self._retrieve())
        elif write:
            validated = validate_sequence(self._category, name, values)
            self._post_all(validated)
            self._store(validated)
        else:
            self._store(validate_sequence(self._category, name, values))

    @property
    def _wire_booleans(self) -> bool:
        return self._category in WIRE_INTEGER_BOOLEANS

    def _retrieve(self) -> list[Any]:
        values = self._owner.get_json(self._path)
        if not isinstance(values, list):
            raise self._owner.invalid_response(
                self._path, cause=TypeError(f"expected a list, got {type(values).__name__}")
            )
        if self._wire_booleans:
            return [val != 0 for val in values]
        return list(values)

    def _encode(self, value: Any) -> Any:
        if self._wire_booleans:
            return 1 if value else 0
        return value

    def _store(self, values: list[Any]) -> None:
        """Update the local mirror without touching the controller."""
        self._values = values

    def _post_all(self, validated: list[Any]) -> None:
        self._owner.post_json(self._path, [self._encode(v) for v in validated])

    def replace(self, values: Sequence[Any]) -> None:
        """Validate and write the whole table in one request, then update the mirror."""
        validated = validate_sequence(self._category, self._name, values)
        if len(validated) != len(self._values):
            raise InvalidValueError(
                self._name,
                values,
                f"Table {self._name} holds {len(self._values)} values, got {len(validated)}",
            )
        self._post_all(validated)
        self._store(validated)

    def set_index(self, index: int, value: Any) -> None:
        """Validate and write a single element; the mirror is restored if the write fails."""
        if isinstance(index, bool) or not isinstance(index, int):
            raise TypeError(f"Table indices must be integers, not {type(index).__name__}")
        if index < 0:
            index += len(self._values)
        if not 0 <= index < len(self._values):
            raise IndexError(f"Index {index} out of range for table {self._name} of length {len(self._values)}")

        validated = validate_element(self._category, f"{self._name}[{index}]", value)
        previous = list(self._values)
        updated = list(self._values)
        updated[index] = validated
        self._store(updated)
        try:
            self._owner.post_json(f"{self._path}/{index}", {"value": self._encode(validated)})
        except RemoteError:
            logger.debug("Write to %s[%d] failed; restoring local mirror", self._name, index)
            self._store(previous)
            raise

    def __setitem__(self, index: int, value: Any) -> None:
        if isinstance(index, slice):
            raise TypeError("Partial table writes are not supported; use replace()")
        self.set_index(index, value)

    @overload
    def __getitem__(self, index: int) -> Any: ...

    @overload
    def __getitem__(self, index: slice) -> list[Any]: ...

    def __getitem__(self, index: int | slice) -> Any:
        return self._values[index]

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[Any]:
        return iter(list(self._values))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, OptoTable):
            return self._values == other._values
        if isinstance(other, Sequence) and not isinstance(other, (str, bytes)):
            return self._values == list(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"OptoTable({self._name!r}, {self._values!r})"

    def to_list(self) -> list[Any]:
        return list(self._values)

    @property
    def name(self) -> str:
        return self._name

    @property
    def category(self) -> Category:
        return self._category

    @property
    def path(self) -> str:
        return self._path
