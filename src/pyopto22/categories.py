"""CategoryMap: load endpoint and prefix tables from embedded JSON via importlib.resources."""

import json
import logging
from collections.abc import Mapping
from importlib import resources
from types import MappingProxyType
from typing import Any

from .prefixes import PrefixTable
from .types import Category

logger = logging.getLogger(__name__)

_PROFILE_RESOURCE: dict[str, str] = {
    "snap-pac": "snap_pac.json",
}

DEFAULT_PROFILE = "snap-pac"


def _parse_category(raw: str, context: str) -> Category:
    try:
        return Category(raw)
    except ValueError:
        raise ValueError(f"Unknown category {raw!r} for {context}") from None


def _parse_map(data: Mapping[str, Any]) -> tuple[str, str, dict[Category, str], dict[str, Category]]:
    """Validate a map document: device/strategy paths, endpoint table, prefix table."""
    try:
        device = str(data["device"])
        strategy = str(data["strategy"])
        raw_endpoints = data["endpoints"]
        raw_prefixes = data["prefixes"]
    except KeyError as e:
        raise ValueError(f"Category map is missing key {e.args[0]!r}") from None

    endpoints: dict[Category, str] = {}
    for key, path in raw_endpoints.items():
        endpoints[_parse_category(key, f"endpoint {path!r}")] = str(path).rstrip("/")

    prefixes: dict[str, Category] = {}
    for prefix, key in raw_prefixes.items():
        category = _parse_category(key, f"prefix {prefix!r}")
        if category not in endpoints:
            raise ValueError(f"Prefix {prefix!r} maps to {category.value!r}, which has no endpoint")
        prefixes[prefix] = category

    return device, strategy, endpoints, prefixes


class CategoryMap:
    """
    Immutable configuration for one controller: where each category lives on the
    REST interface and which name prefix selects it. Loaded from packaged JSON
    (default profile snap-pac) or from map_override.
    """

    def __init__(self, profile: str = DEFAULT_PROFILE, map_override: Mapping[str, Any] | None = None) -> None:
        self._profile = profile.lower()

        if map_override is not None:
            data = map_override
            logger.debug("CategoryMap loaded from override")
        else:
            json_name = _PROFILE_RESOURCE.get(self._profile)
            if not json_name:
                raise ValueError(f"Unknown profile: {profile!r}")
            try:
                with resources.files("pyopto22").joinpath("data").joinpath(json_name).open("r", encoding="utf-8") as f:
                    data = json.load(f)
            except FileNotFoundError:
                raise FileNotFoundError(f"Category map resource not found: pyopto22/data/{json_name}") from None

        device, strategy, endpoints, prefixes = _parse_map(data)
        self._device_path = device
        self._strategy_path = strategy
        self._endpoints: Mapping[Category, str] = MappingProxyType(endpoints)
        self._prefix_table = PrefixTable(prefixes)

        logger.debug(
            "CategoryMap for profile %s: %d endpoints, %d prefixes",
            self._profile,
            len(self._endpoints),
            len(self._prefix_table),
        )

    def resolve(self, name: str) -> Category:
        return self._prefix_table.resolve(name)

    def endpoint(self, category: Category) -> str:
        """Collection path for a category; raise KeyError if the map does not define it."""
        return self._endpoints[category]

    def variable_path(self, category: Category, name: str) -> str:
        return f"{self._endpoints[category]}/{name}"

    def write_path(self, category: Category, name: str) -> str | None:
        """Path a scalar or whole-table write POSTs to; None for read-only categories."""
        if category.read_only:
            return None
        return f"{self.variable_path(category, name)}{category.write_suffix}"

    @property
    def prefix_table(self) -> PrefixTable:
        return self._prefix_table

    @property
    def endpoints(self) -> Mapping[Category, str]:
        return self._endpoints

    @property
    def device_path(self) -> str:
        return self._device_path

    @property
    def strategy_path(self) -> str:
        return self._strategy_path

    @property
    def profile(self) -> str:
        return self._profile


def get_default_category_map(profile: str = DEFAULT_PROFILE) -> CategoryMap:
    """Load and return the CategoryMap for the given profile (default snap-pac)."""
    return CategoryMap(profile=profile)
