from datetime import datetime, timezone
from typing import Sequence, Tuple

from heatpump_link.domain.exceptions import MalformedPayloadError
from heatpump_link.domain.registers import (
    EXTENDED_THRESHOLD,
    EXTENDED_VALUES_LENGTH,
    FAULT_HISTORY_DEPTH,
    MIN_PARAMETERS_LENGTH,
    MIN_VALUES_LENGTH,
    THERMAL_ENERGY_OFFSET,
    ParameterRegister as P,
    ValueRegister as V,
)
from heatpump_link.domain.snapshots import FaultEntry, ParameterSnapshot, ValueSnapshot

# Temperature, energy and hour registers are transmitted as tenths
_TENTHS = 10.0


def decode(values: Sequence[int], parameters: Sequence[int]) -> Tuple[ValueSnapshot, ParameterSnapshot]:
    """
    Decodes both raw register arrays of one refresh cycle.
    Raises MalformedPayloadError if either array is too short.
    """
    return decode_values(values), decode_parameters(parameters)


def decode_values(values: Sequence[int]) -> ValueSnapshot:
    if len(values) < MIN_VALUES_LENGTH:
        raise MalformedPayloadError(f"Value array has {len(values)} registers, expected at least {MIN_VALUES_LENGTH}")

    extended = {}
    if len(values) > EXTENDED_THRESHOLD:
        if len(values) < EXTENDED_VALUES_LENGTH:
            raise MalformedPayloadError(
                f"Value array has {len(values)} registers, extended block needs {EXTENDED_VALUES_LENGTH}"
            )
        extended = {
            "output_av2": _flag(values, V.OUTPUT_AV2),
            "output_vbo2": _flag(values, V.OUTPUT_VBO2),
            "output_vd12": _flag(values, V.OUTPUT_VD12),
            "output_vdh2": _flag(values, V.OUTPUT_VDH2),
        }

    return ValueSnapshot(
        supply_temperature=_temperature(values, V.TEMPERATURE_SUPPLY),
        return_temperature=_temperature(values, V.TEMPERATURE_RETURN),
        reference_return_temperature=_temperature(values, V.TEMPERATURE_REFERENCE_RETURN),
        out_external_temperature=_temperature(values, V.TEMPERATURE_OUT_EXTERNAL),
        hot_gas_temperature=_temperature(values, V.TEMPERATURE_HOT_GAS),
        outside_temperature=_temperature(values, V.TEMPERATURE_OUTSIDE),
        outside_avg_temperature=_temperature(values, V.TEMPERATURE_OUTSIDE_AVG),
        servicewater_temperature=_temperature(values, V.TEMPERATURE_SERVICEWATER),
        servicewater_reference_temperature=_temperature(values, V.TEMPERATURE_SERVICEWATER_REFERENCE),
        probe_in_temperature=_temperature(values, V.TEMPERATURE_PROBE_IN),
        probe_out_temperature=_temperature(values, V.TEMPERATURE_PROBE_OUT),
        mk1_temperature=_temperature(values, V.TEMPERATURE_MK1),
        mk1_reference_temperature=_temperature(values, V.TEMPERATURE_MK1_REFERENCE),
        mk2_temperature=_temperature(values, V.TEMPERATURE_MK2),
        mk2_reference_temperature=_temperature(values, V.TEMPERATURE_MK2_REFERENCE),
        solar_collector_temperature=_temperature(values, V.TEMPERATURE_SOLAR_COLLECTOR),
        solar_storage_temperature=_temperature(values, V.TEMPERATURE_SOLAR_STORAGE),
        external_source_temperature=_temperature(values, V.TEMPERATURE_EXTERNAL_SOURCE),
        time_compressor1=values[V.TIME_COMPRESSOR1],
        starts_compressor1=values[V.STARTS_COMPRESSOR1],
        time_compressor2=values[V.TIME_COMPRESSOR2],
        starts_compressor2=values[V.STARTS_COMPRESSOR2],
        time_zwe1=values[V.TIME_ZWE1],
        time_zwe2=values[V.TIME_ZWE2],
        time_zwe3=values[V.TIME_ZWE3],
        time_heatpump=values[V.TIME_HEATPUMP],
        time_heating=values[V.TIME_HEATING],
        time_warmwater=values[V.TIME_WARMWATER],
        time_cooling=values[V.TIME_COOLING],
        thermal_energy_heating=_thermal_energy(values, V.THERMALENERGY_HEATING),
        thermal_energy_warmwater=_thermal_energy(values, V.THERMALENERGY_WARMWATER),
        thermal_energy_pool=_thermal_energy(values, V.THERMALENERGY_POOL),
        thermal_energy_total=_thermal_energy(values, V.THERMALENERGY_TOTAL),
        massflow=values[V.MASSFLOW],
        heatpump_state=values[V.HEATPUMP_STATE],
        heatpump_extended_state=values[V.HEATPUMP_EXTENDED_STATE],
        heatpump_state_time=values[V.HEATPUMP_STATE_TIME],
        switchoff_errors=_fault_history(values, V.SWITCHOFF_ERROR_0, V.SWITCHOFF_ERROR_TIMESTAMP_0),
        switchoff_error_count=values[V.SWITCHOFF_ERROR_COUNT],
        switchoff_reasons=_fault_history(values, V.SWITCHOFF_REASON_0, V.SWITCHOFF_REASON_TIMESTAMP_0),
        output_av=_flag(values, V.OUTPUT_AV),
        output_bup=_flag(values, V.OUTPUT_BUP),
        output_hup=_flag(values, V.OUTPUT_HUP),
        output_ma1=_flag(values, V.OUTPUT_MA1),
        output_mz1=_flag(values, V.OUTPUT_MZ1),
        output_ven=_flag(values, V.OUTPUT_VEN),
        output_vbo=_flag(values, V.OUTPUT_VBO),
        output_vd1=_flag(values, V.OUTPUT_VD1),
        output_vd2=_flag(values, V.OUTPUT_VD2),
        output_zip=_flag(values, V.OUTPUT_ZIP),
        output_zup=_flag(values, V.OUTPUT_ZUP),
        output_zw1=_flag(values, V.OUTPUT_ZW1),
        output_zw2sst=_flag(values, V.OUTPUT_ZW2SST),
        output_zw3sst=_flag(values, V.OUTPUT_ZW3SST),
        output_fp2=_flag(values, V.OUTPUT_FP2),
        output_slp=_flag(values, V.OUTPUT_SLP),
        output_sup=_flag(values, V.OUTPUT_SUP),
        output_mz2=_flag(values, V.OUTPUT_MZ2),
        output_ma2=_flag(values, V.OUTPUT_MA2),
        output_mz3=_flag(values, V.OUTPUT_MZ3),
        output_ma3=_flag(values, V.OUTPUT_MA3),
        output_fp3=_flag(values, V.OUTPUT_FP3),
        output_vsk=_flag(values, V.OUTPUT_VSK),
        output_frh=_flag(values, V.OUTPUT_FRH),
        **extended,
    )


def decode_parameters(parameters: Sequence[int]) -> ParameterSnapshot:
    if len(parameters) < MIN_PARAMETERS_LENGTH:
        raise MalformedPayloadError(
            f"Parameter array has {len(parameters)} registers, expected at least {MIN_PARAMETERS_LENGTH}"
        )

    return ParameterSnapshot(
        heating_operation_mode=parameters[P.HEATING_OPERATION_MODE],
        warmwater_operation_mode=parameters[P.WARMWATER_OPERATION_MODE],
        cooling_operation_mode=parameters[P.COOLING_OPERATION_MODE],
        heating_temperature=parameters[P.HEATING_TEMPERATURE] / _TENTHS,
        warmwater_temperature=parameters[P.WARMWATER_TEMPERATURE] / _TENTHS,
        cooling_release_temperature=parameters[P.COOLING_RELEASE_TEMPERATURE] / _TENTHS,
        cooling_inlet_temperature=parameters[P.COOLING_INLET_TEMPERATURE] / _TENTHS,
        cooling_start_after_hours=parameters[P.COOLING_START_AFTER_HOURS] / _TENTHS,
        cooling_stop_after_hours=parameters[P.COOLING_STOP_AFTER_HOURS] / _TENTHS,
    )


def correct_thermal_energy(raw: int) -> int:
    """
    Thermal energies can be unreasonably high, probably due to a sign bug in
    the firmware. Values at or above the offset are shifted back by it.
    """
    if raw >= THERMAL_ENERGY_OFFSET:
        return raw - THERMAL_ENERGY_OFFSET
    return raw


def to_local_datetime(timestamp: int) -> datetime:
    """Epoch seconds to an aware datetime in the local system time zone."""
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).astimezone()


def _temperature(values: Sequence[int], register: V) -> float:
    return values[register] / _TENTHS


def _thermal_energy(values: Sequence[int], register: V) -> float:
    return correct_thermal_energy(values[register]) / _TENTHS


def _flag(values: Sequence[int], register: V) -> bool:
    return values[register] != 0


def _fault_history(values: Sequence[int], first_code: V, first_timestamp: V) -> Tuple[FaultEntry, ...]:
    return tuple(
        FaultEntry(code=values[first_code + i], timestamp=to_local_datetime(values[first_timestamp + i]))
        for i in range(FAULT_HISTORY_DEPTH)
    )
