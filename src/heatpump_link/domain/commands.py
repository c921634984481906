from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict

from heatpump_link.domain.registers import ParameterRegister

CommandValue = Union[str, int, float, Decimal]


class CommandTarget(str, Enum):
    """Externally addressable control points, named after their channels."""

    HEATING_OPERATION_MODE = "heating_operation_mode"
    HEATING_TEMPERATURE = "heating_temperature"
    WARMWATER_OPERATION_MODE = "warmwater_operation_mode"
    WARMWATER_TEMPERATURE = "warmwater_temperature"
    COOLING_OPERATION_MODE = "cooling_operation_mode"
    COOLING_RELEASE_TEMPERATURE = "cooling_release_temperature"
    COOLING_INLET_TEMPERATURE = "cooling_inlet_temperature"
    COOLING_START_AFTER_HOURS = "cooling_start_after_hours"
    COOLING_STOP_AFTER_HOURS = "cooling_stop_after_hours"


class ValueKind(str, Enum):
    MODE = "mode"  # Enumerated value sent as a string, e.g. "2"
    TENTHS = "tenths"  # Decimal value stored as tenths


class EncodingRule(BaseModel):
    model_config = ConfigDict(frozen=True)

    parameter: ParameterRegister
    kind: ValueKind
    valid_range: Optional[Tuple[int, int]] = None  # Inclusive, modes only


class Command(BaseModel):
    # Strict so that "2" stays a string and True is not taken for 1
    model_config = ConfigDict(frozen=True, strict=True)

    value: CommandValue


class RefreshCommand:
    """Asks for fresh data. Polling is scheduled, so it is never encoded."""

    def __repr__(self) -> str:
        return "REFRESH"


REFRESH = RefreshCommand()
