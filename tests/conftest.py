import asyncio
from typing import List, Optional

import pytest

from heatpump_link.domain.configuration import HeatpumpConfig
from heatpump_link.domain.registers import EXTENDED_VALUES_LENGTH, MIN_PARAMETERS_LENGTH, MIN_VALUES_LENGTH


class FakeHeatpump:
    """Scriptable device: records every call and tracks overlapping sessions."""

    def __init__(self, values: List[int], parameters: List[int]):
        self.values = values
        self.parameters = parameters
        self.connect_error: Optional[BaseException] = None
        self.read_error: Optional[BaseException] = None
        self.write_error: Optional[BaseException] = None
        self.create_error: Optional[BaseException] = None
        self.delay = 0.0
        self.calls: List[str] = []
        self.writes: List[tuple] = []
        self.opened = 0
        self.closed = 0
        self.active = 0
        self.max_active = 0

    def factory(self, host: str, port: int, timeout: float) -> "FakeConnector":
        self.calls.append(f"create {host}:{port} timeout={timeout}")
        if self.create_error is not None:
            raise self.create_error
        return FakeConnector(self)


class FakeConnector:
    def __init__(self, device: FakeHeatpump):
        self.device = device
        self._open = False

    async def connect(self) -> None:
        self.device.calls.append("connect")
        if self.device.connect_error is not None:
            raise self.device.connect_error
        self._open = True
        self.device.opened += 1
        self.device.active += 1
        self.device.max_active = max(self.device.max_active, self.device.active)

    async def read_values(self) -> List[int]:
        self.device.calls.append("read_values")
        await asyncio.sleep(self.device.delay)
        if self.device.read_error is not None:
            raise self.device.read_error
        return list(self.device.values)

    async def read_parameters(self) -> List[int]:
        self.device.calls.append("read_parameters")
        await asyncio.sleep(self.device.delay)
        return list(self.device.parameters)

    async def write_parameter(self, index: int, value: int) -> None:
        self.device.calls.append("write_parameter")
        await asyncio.sleep(self.device.delay)
        if self.device.write_error is not None:
            raise self.device.write_error
        self.device.writes.append((index, value))

    async def close(self) -> None:
        self.device.calls.append("close")
        if self._open:
            self._open = False
            self.device.closed += 1
            self.device.active -= 1


@pytest.fixture
def values():
    """A value array of the minimum length, all registers zero."""
    return [0] * MIN_VALUES_LENGTH


@pytest.fixture
def extended_values():
    """A value array including the extended output block."""
    return [0] * EXTENDED_VALUES_LENGTH


@pytest.fixture
def parameters():
    """A parameter array of the minimum length, all registers zero."""
    return [0] * MIN_PARAMETERS_LENGTH


@pytest.fixture
def fake_heatpump(values, parameters):
    return FakeHeatpump(values, parameters)


@pytest.fixture
def config():
    return HeatpumpConfig(host="192.168.1.50", port=8889, connection_timeout=1, polling_interval=60)
