import asyncio
import logging
import random
from datetime import datetime, timezone
from typing import List, Optional

from heatpump_link.domain.exceptions import TransportIOError
from heatpump_link.domain.registers import (
    EXTENDED_VALUES_LENGTH,
    FAULT_HISTORY_DEPTH,
    MIN_PARAMETERS_LENGTH,
    ParameterRegister,
    ValueRegister,
)

logger = logging.getLogger(__name__)


class SimulatedHeatpump:
    """In-process heat pump whose registers survive across connector sessions."""

    def __init__(self, extended: bool = True):
        self.parameters: List[int] = [0] * MIN_PARAMETERS_LENGTH
        self.parameters[ParameterRegister.WARMWATER_TEMPERATURE] = 480
        self.parameters[ParameterRegister.COOLING_RELEASE_TEMPERATURE] = 250
        self.parameters[ParameterRegister.COOLING_INLET_TEMPERATURE] = 180
        self.parameters[ParameterRegister.COOLING_START_AFTER_HOURS] = 120
        self.parameters[ParameterRegister.COOLING_STOP_AFTER_HOURS] = 120
        self.value_count = EXTENDED_VALUES_LENGTH if extended else int(ValueRegister.OUTPUT_AV2)
        self._started = int(datetime.now(timezone.utc).timestamp())

    def values(self) -> List[int]:
        values = [0] * self.value_count

        outside = random.uniform(-5.0, 15.0)
        ret_temp = random.uniform(25.0, 45.0)
        supply_temp = ret_temp + random.uniform(2.0, 5.0)
        dhw_temp = random.uniform(40.0, 60.0)

        values[ValueRegister.TEMPERATURE_SUPPLY] = round(supply_temp * 10)
        values[ValueRegister.TEMPERATURE_RETURN] = round(ret_temp * 10)
        values[ValueRegister.TEMPERATURE_REFERENCE_RETURN] = round(ret_temp * 10) + 5
        values[ValueRegister.TEMPERATURE_OUTSIDE] = round(outside * 10)
        values[ValueRegister.TEMPERATURE_OUTSIDE_AVG] = round(outside * 10)
        values[ValueRegister.TEMPERATURE_SERVICEWATER] = round(dhw_temp * 10)
        values[ValueRegister.TEMPERATURE_SERVICEWATER_REFERENCE] = self.parameters[
            ParameterRegister.WARMWATER_TEMPERATURE
        ]

        uptime = int(datetime.now(timezone.utc).timestamp()) - self._started
        values[ValueRegister.TIME_COMPRESSOR1] = 3600000 + uptime
        values[ValueRegister.STARTS_COMPRESSOR1] = 4200
        values[ValueRegister.TIME_HEATPUMP] = 3600000 + uptime
        values[ValueRegister.THERMALENERGY_HEATING] = 105000
        values[ValueRegister.THERMALENERGY_WARMWATER] = 32000
        values[ValueRegister.THERMALENERGY_TOTAL] = 137000
        values[ValueRegister.MASSFLOW] = 1000

        values[ValueRegister.OUTPUT_VD1] = 1
        values[ValueRegister.OUTPUT_HUP] = 1

        for i in range(FAULT_HISTORY_DEPTH):
            values[ValueRegister.SWITCHOFF_ERROR_TIMESTAMP_0 + i] = self._started - 86400 * (i + 1)
            values[ValueRegister.SWITCHOFF_REASON_TIMESTAMP_0 + i] = self._started - 3600 * (i + 1)
        return values


class MockHeatpumpConnector:
    """
    Connector talking to a SimulatedHeatpump. Matches the connector factory
    signature so it can be passed to a handler directly.
    """

    def __init__(self, host: str, port: int, timeout: float, device: Optional[SimulatedHeatpump] = None):
        self.host = host
        self.port = port
        self.timeout = timeout
        self.device = device or SimulatedHeatpump()
        self._connected = False

    async def connect(self) -> None:
        logger.debug(f"Mock: Connecting to heatpump {self.host}:{self.port}")
        await asyncio.sleep(0)
        self._connected = True

    async def read_values(self) -> List[int]:
        self._ensure_connected()
        logger.debug("Mock: Reading heatpump values")
        return self.device.values()

    async def read_parameters(self) -> List[int]:
        self._ensure_connected()
        logger.debug("Mock: Reading heatpump parameters")
        return list(self.device.parameters)

    async def write_parameter(self, index: int, value: int) -> None:
        self._ensure_connected()
        if not 0 <= index < len(self.device.parameters):
            raise TransportIOError(f"Parameter {index} not acknowledged")
        logger.debug(f"Mock: Setting parameter {index} to {value}")
        self.device.parameters[index] = value

    async def close(self) -> None:
        self._connected = False

    def _ensure_connected(self) -> None:
        if not self._connected:
            raise TransportIOError("Not connected")
