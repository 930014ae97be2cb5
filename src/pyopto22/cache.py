"""VariableCache: bulk-loaded scalar collections and per-name table mirrors."""

import logging
from typing import TYPE_CHECKING, Any, Protocol

from .categories import CategoryMap
from .errors import RemoteError, UnknownVariableError
from .types import Category

if TYPE_CHECKING:
    from .table import OptoTable

logger = logging.getLogger(__name__)


class JSONReader(Protocol):
    def get_json(self, path: str) -> Any: ...

    def invalid_response(self, path: str, *, cause: BaseException | None = None) -> RemoteError: ...


class VariableCache:
    """
    Per-controller cache.

    Scalar collections are keyed by endpoint, so categories that share an
    endpoint (integers and their boolean overlay) share one bulk fetch. A
    collection is fetched at most once between clear() calls. Tables are held
    per variable name.
    """

    def __init__(self, reader: JSONReader, category_map: CategoryMap) -> None:
        self._reader = reader
        self._map = category_map
        self._scalars: dict[str, dict[str, Any]] = {}
        self._tables: dict[str, "OptoTable"] = {}

    def _load_collection(self, endpoint: str) -> dict[str, Any]:
        raw = self._reader.get_json(endpoint)
        if not isinstance(raw, list):
            raise self._reader.invalid_response(endpoint, cause=TypeError(f"expected a list, got {type(raw).__name__}"))
        collection: dict[str, Any] = {}
        prefixes = self._map.prefix_table
        # only the integer collection carries the boolean overlay
        overlay = endpoint == self._map.endpoints.get(Category.BOOLEAN)
        for entry in raw:
            if not isinstance(entry, dict) or "name" not in entry:
                raise self._reader.invalid_response(endpoint, cause=ValueError(f"malformed entry {entry!r}"))
            name = entry["name"]
            value = entry.get("value")
            if overlay and prefixes.is_boolean(name) and value is not None:
                value = value != 0
            collection[name] = value
        logger.debug("Fetched %d variables from %s", len(collection), endpoint)
        return collection

    def get_scalar(self, category: Category, name: str) -> Any:
        """Return a scalar's cached value, bulk-fetching its collection on first access."""
        endpoint = self._map.endpoint(category)
        collection = self._scalars.get(endpoint)
        if collection is None:
            collection = self._load_collection(endpoint)
            self._scalars[endpoint] = collection
        if name not in collection:
            raise UnknownVariableError(name, category)
        return collection[name]

    def set_scalar(self, category: Category, name: str, value: Any) -> None:
        """Record a confirmed write; only touches an already-loaded collection."""
        collection = self._scalars.get(self._map.endpoint(category))
        if collection is not None:
            collection[name] = value

    def is_loaded(self, category: Category) -> bool:
        return self._map.endpoint(category) in self._scalars

    def get_table(self, name: str) -> "OptoTable | None":
        return self._tables.get(name)

    def store_table(self, table: "OptoTable") -> None:
        self._tables[table.name] = table

    def clear(self) -> None:
        """Drop every cached collection and table; later reads fetch again."""
        self._scalars.clear()
        self._tables.clear()
        logger.debug("Variable cache cleared")

    def __len__(self) -> int:
        return sum(len(c) for c in self._scalars.values()) + len(self._tables)
