"""PACController: name-keyed get/set over a controller's strategy variables with bulk caching."""

import logging
from typing import Any

from .accessor import VariableNamespace
from .cache import VariableCache
from .categories import DEFAULT_PROFILE, CategoryMap, get_default_category_map
from .channel import RemoteChannel
from .device import parse_device_info, parse_strategy_info
from .error_log import ErrorLog
from .errors import BlankParameterError, ReadOnlyError, RemoteError
from .prefixes import extract_prefix
from .table import OptoTable
from .types import Category, DeviceInfo, ExplainInfo, RequestLog, StrategyInfo
from .validate import validate_value

logger = logging.getLogger(__name__)

CACHE_CLEARED_MARKER = "==>  Cache cleared"


class PACController:
    """
    High-level client for a controller's REST variable space, addressed by
    prefixed names (e.g. iCount, bReady, ftSetpoints, aoValve).

    Scalar categories are fetched in bulk on first access and cached; table
    variables are returned as write-through OptoTable objects. Not thread-safe.
    """

    def __init__(
        self,
        host: str,
        username: str,
        password: str,
        *,
        profile: str = DEFAULT_PROFILE,
        category_map: CategoryMap | None = None,
        load_device: bool = False,
        timeout: float = 10.0,
        scheme: str = "http",
        port: int | None = None,
        verify: bool = True,
        error_log: ErrorLog | None = None,
    ) -> None:
        if not host or not str(host).strip():
            raise BlankParameterError("host")
        if not username:
            raise BlankParameterError("username")
        if not password:
            raise BlankParameterError("password")

        self._host = host
        self._map = category_map if category_map is not None else get_default_category_map(profile)
        self._request_log = RequestLog()
        self._channel = RemoteChannel(
            host,
            username,
            password,
            scheme=scheme,
            port=port,
            timeout=timeout,
            verify=verify,
            request_log=self._request_log,
            error_log=error_log,
        )
        self._cache = VariableCache(self._channel, self._map)
        self._device_info: DeviceInfo | None = None
        self._strategy_info: StrategyInfo | None = None

        if load_device:
            self.load_device_info()

    # -- transport -------------------------------------------------------

    def get_json(self, path: str) -> Any:
        return self._channel.get_json(path)

    def post_json(self, path: str, payload: Any) -> None:
        self._channel.post_json(path, payload)

    def invalid_response(self, path: str, *, cause: BaseException | None = None) -> RemoteError:
        return self._channel.invalid_response(path, cause=cause)

    def close(self) -> None:
        """Close the HTTP session."""
        try:
            self._channel.close()
        except Exception as e:
            logger.warning("Error closing REST session: %s", e)

    def __enter__(self) -> "PACController":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    # -- variables -------------------------------------------------------

    def resolve(self, name: str) -> Category:
        return self._map.resolve(name)

    def get(self, name: str) -> Any:
        """
        Return the current value of a variable.

        Scalars come from the category's cached collection (fetched in one GET on
        first access). Tables are returned as OptoTable, loaded once per name.
        """
        category = self.resolve(name)
        if category.is_table:
            table = self._cache.get_table(name)
            if table is None:
                table = OptoTable(self, name)
                self._cache.store_table(table)
            return table
        return self._cache.get_scalar(category, name)

    def set(self, name: str, value: Any) -> None:
        """Validate and write a variable, then update the cached copy."""
        category = self.resolve(name)
        if category.read_only:
            raise ReadOnlyError(name, category)
        validated = validate_value(category, name, value)

        if category.is_table:
            table = self._cache.get_table(name)
            if table is None:
                self._cache.store_table(OptoTable(self, name, validated, write=True))
            else:
                table.replace(validated)
            return

        path = self._map.write_path(category, name)
        self.post_json(path, {"value": self._encode_scalar(category, validated)})
        self._cache.set_scalar(category, name, validated)

    @staticmethod
    def _encode_scalar(category: Category, value: Any) -> Any:
        # Digital outputs take JSON booleans; every other boolean travels as 0/1
        if category == Category.DIGITAL_OUTPUT:
            return value
        if isinstance(value, bool):
            return 1 if value else 0
        return value

    get_variable = get
    set_variable = set

    def __getitem__(self, name: str) -> Any:
        return self.get(name)

    def __setitem__(self, name: str, value: Any) -> None:
        self.set(name, value)

    def read_many(self, names: list[str]) -> dict[str, Any]:
        """
        Read several variables; tables are returned as plain lists.
        Names sharing a category cost a single request between cache clears.
        """
        out: dict[str, Any] = {}
        for name in names:
            value = self.get(name)
            out[name] = value.to_list() if isinstance(value, OptoTable) else value
        return out

    def clear_cache(self) -> None:
        """Forget every cached collection and table."""
        self._cache.clear()
        self._request_log.note(CACHE_CLEARED_MARKER)

    def explain(self, name: str) -> ExplainInfo:
        """Describe how a name resolves and which paths it reads/writes. No network I/O."""
        category = self.resolve(name)
        return explain_name(self._map, name, category)

    @property
    def vars(self) -> VariableNamespace:
        """Attribute-style access: plc.vars.iCount, plc.vars.fSetpoint = 1.5."""
        return VariableNamespace(self)

    # -- device ----------------------------------------------------------

    def load_device_info(self) -> None:
        """Fetch device identity and running-strategy metadata (two GETs)."""
        self._device_info = parse_device_info(self.get_json(self._map.device_path))
        self._strategy_info = parse_strategy_info(self.get_json(self._map.strategy_path))

    @property
    def device_info(self) -> DeviceInfo | None:
        return self._device_info

    @property
    def strategy_info(self) -> StrategyInfo | None:
        return self._strategy_info

    # -- telemetry -------------------------------------------------------

    @property
    def request_count(self) -> int:
        return self._request_log.count

    @property
    def request_urls(self) -> list[str]:
        return list(self._request_log.entries)

    @property
    def request_log(self) -> RequestLog:
        return self._request_log

    @property
    def category_map(self) -> CategoryMap:
        return self._map

    @property
    def host(self) -> str:
        return self._host


def explain_name(category_map: CategoryMap, name: str, category: Category | None = None) -> ExplainInfo:
    """Build ExplainInfo for a name against a category map."""
    if category is None:
        category = category_map.resolve(name)
    if category.is_table:
        read_path = category_map.variable_path(category, name)
    else:
        read_path = category_map.endpoint(category)
    return ExplainInfo(
        name=name,
        prefix=extract_prefix(name),
        category=category,
        base_type=category.base_type,
        is_table=category.is_table,
        read_only=category.read_only,
        read_path=read_path,
        write_path=category_map.write_path(category, name),
    )
