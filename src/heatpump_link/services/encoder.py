from decimal import Decimal
from typing import Dict, Optional, Tuple, Union

from heatpump_link.domain.commands import Command, CommandTarget, EncodingRule, ValueKind
from heatpump_link.domain.exceptions import OutOfRangeError, UnsupportedCommandTypeError
from heatpump_link.domain.registers import ParameterRegister

_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1

ENCODING_RULES: Dict[CommandTarget, EncodingRule] = {
    CommandTarget.HEATING_OPERATION_MODE: EncodingRule(
        parameter=ParameterRegister.HEATING_OPERATION_MODE, kind=ValueKind.MODE, valid_range=(0, 4)
    ),
    CommandTarget.HEATING_TEMPERATURE: EncodingRule(
        parameter=ParameterRegister.HEATING_TEMPERATURE, kind=ValueKind.TENTHS
    ),
    CommandTarget.WARMWATER_OPERATION_MODE: EncodingRule(
        parameter=ParameterRegister.WARMWATER_OPERATION_MODE, kind=ValueKind.MODE, valid_range=(0, 4)
    ),
    CommandTarget.WARMWATER_TEMPERATURE: EncodingRule(
        parameter=ParameterRegister.WARMWATER_TEMPERATURE, kind=ValueKind.TENTHS
    ),
    CommandTarget.COOLING_OPERATION_MODE: EncodingRule(
        parameter=ParameterRegister.COOLING_OPERATION_MODE, kind=ValueKind.MODE, valid_range=(0, 1)
    ),
    CommandTarget.COOLING_RELEASE_TEMPERATURE: EncodingRule(
        parameter=ParameterRegister.COOLING_RELEASE_TEMPERATURE, kind=ValueKind.TENTHS
    ),
    CommandTarget.COOLING_INLET_TEMPERATURE: EncodingRule(
        parameter=ParameterRegister.COOLING_INLET_TEMPERATURE, kind=ValueKind.TENTHS
    ),
    CommandTarget.COOLING_START_AFTER_HOURS: EncodingRule(
        parameter=ParameterRegister.COOLING_START_AFTER_HOURS, kind=ValueKind.TENTHS
    ),
    CommandTarget.COOLING_STOP_AFTER_HOURS: EncodingRule(
        parameter=ParameterRegister.COOLING_STOP_AFTER_HOURS, kind=ValueKind.TENTHS
    ),
}


def resolve_target(channel_id: Union[str, CommandTarget]) -> Optional[CommandTarget]:
    """
    Maps a channel id to its command target.
    Returns None for channels that cannot receive commands.
    """
    try:
        return CommandTarget(channel_id)
    except ValueError:
        return None


def encode(target: CommandTarget, command: Command) -> Tuple[ParameterRegister, int]:
    """
    Encodes a command into the parameter register write that carries it out.
    """
    rule = ENCODING_RULES[target]
    if rule.kind is ValueKind.MODE:
        return rule.parameter, _encode_mode(target, rule, command.value)
    return rule.parameter, _encode_tenths(target, command.value)


def _encode_mode(target: CommandTarget, rule: EncodingRule, value) -> int:
    if not isinstance(value, str):
        raise UnsupportedCommandTypeError(
            target.value, value, f"{target.value} expects a mode string, got {type(value).__name__}"
        )
    try:
        mode = int(value.strip())
    except ValueError:
        raise UnsupportedCommandTypeError(target.value, value, f"{target.value} mode {value!r} is not a number")

    low, high = rule.valid_range
    if not low <= mode <= high:
        raise OutOfRangeError(target.value, value, f"{target.value} mode {mode} is unknown (valid: {low}-{high})")
    return mode


def _encode_tenths(target: CommandTarget, value) -> int:
    if isinstance(value, (str, bool)) or not isinstance(value, (int, float, Decimal)):
        raise UnsupportedCommandTypeError(
            target.value, value, f"{target.value} expects a number, got {type(value).__name__}"
        )
    # Through the shortest decimal repr, so 21.5 becomes exactly 215
    tenths = Decimal(str(value)) * 10
    if not tenths.is_finite():
        raise UnsupportedCommandTypeError(target.value, value, f"{target.value} value {value!r} is not finite")
    encoded = int(tenths)
    if not _INT32_MIN <= encoded <= _INT32_MAX:
        raise OutOfRangeError(target.value, value, f"{target.value} value {value!r} does not fit a 32-bit register")
    return encoded
