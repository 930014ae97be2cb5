"""Parse device identity and running-strategy documents."""

import logging
from datetime import datetime
from typing import Any

from .types import DeviceInfo, StrategyInfo

logger = logging.getLogger(__name__)

_FIRMWARE_FORMAT = "%m/%d/%Y %H:%M:%S"
_STRATEGY_FORMAT = "%m/%d/%y %H:%M:%S"


def _parse_timestamp(date: Any, time: Any, fmt: str) -> datetime | None:
    if not date or not time:
        return None
    try:
        return datetime.strptime(f"{date} {time}", fmt)
    except ValueError:
        logger.debug("Unparseable timestamp %r %r", date, time)
        return None


def parse_device_info(raw: dict[str, Any]) -> DeviceInfo:
    return DeviceInfo(
        controller_type=raw.get("controllerType"),
        firmware_version=raw.get("firmwareVersion"),
        firmware_timestamp=_parse_timestamp(raw.get("firmwareDate"), raw.get("firmwareTime"), _FIRMWARE_FORMAT),
        mac_1=raw.get("mac1"),
        mac_2=raw.get("mac2"),
        up_time_seconds=raw.get("upTimeSeconds"),
    )


def parse_strategy_info(raw: dict[str, Any]) -> StrategyInfo:
    return StrategyInfo(
        strategy_name=raw.get("strategyName"),
        strategy_timestamp=_parse_timestamp(raw.get("date"), raw.get("time"), _STRATEGY_FORMAT),
        crc=raw.get("crc"),
        running_charts=raw.get("runningCharts"),
    )
