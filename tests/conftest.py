"""Shared fixtures: a PACController wired to a mocked RemoteChannel."""

from typing import Any, Iterator
from unittest.mock import MagicMock, patch

import pytest

from pyopto22 import PACController

BASE = "/api/v1/device/strategy"

REMOTE_STATE: dict[str, Any] = {
    f"{BASE}/vars/int32s": [
        {"name": "iCount", "value": 12},
        {"name": "iLimit", "value": 100},
        {"name": "bReady", "value": 1},
        {"name": "bFault", "value": 0},
    ],
    f"{BASE}/vars/floats": [
        {"name": "fSetpoint", "value": 72.5},
        {"name": "fGain", "value": 0.25},
    ],
    f"{BASE}/vars/strings": [{"name": "sMessage", "value": "idle"}],
    f"{BASE}/ios/analogInputs": [{"name": "aiTemperature", "value": 21.5}],
    f"{BASE}/ios/analogOutputs": [{"name": "aoValve", "value": 40.0}],
    f"{BASE}/ios/digitalInputs": [{"name": "diDoor", "value": True}],
    f"{BASE}/ios/digitalOutputs": [{"name": "doPump", "value": False}],
    f"{BASE}/vars/upTimers": [{"name": "utRuntime", "value": 3600.0}],
    f"{BASE}/vars/downTimers": [{"name": "dtDelay", "value": 5.0}],
    f"{BASE}/tables/int32s/itCounts": [1, 2, 3],
    f"{BASE}/tables/int32s/btFlags": [1, 0, 1],
    f"{BASE}/tables/floats/ftSetpoints": [1.5, 2.5],
    f"{BASE}/tables/strings/stMessages": ["a", "b"],
    "/api/v1/device": {
        "controllerType": "SNAP-PAC-R1",
        "firmwareVersion": "R10.3b",
        "firmwareDate": "03/12/2019",
        "firmwareTime": "14:05:00",
        "mac1": "00-A0-3D-01-02-03",
        "mac2": "00-A0-3D-01-02-04",
        "upTimeSeconds": 86400,
    },
    f"{BASE}": {
        "strategyName": "Plating",
        "date": "05/01/20",
        "time": "08:30:00",
        "crc": "0x1A2B3C4D",
        "runningCharts": 6,
    },
}


@pytest.fixture
def channel() -> MagicMock:
    """Mocked RemoteChannel serving REMOTE_STATE by path."""
    mock = MagicMock()
    mock.get_json.side_effect = lambda path: REMOTE_STATE[path]
    mock.post_json.return_value = None
    return mock


@pytest.fixture
def plc(channel: MagicMock) -> Iterator[PACController]:
    with patch("pyopto22.controller.RemoteChannel", return_value=channel):
        yield PACController("10.0.0.5", "admin", "secret")
