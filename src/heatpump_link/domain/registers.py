from enum import IntEnum


class ValueRegister(IntEnum):
    """Positions in the measured value array."""

    # Temperatures (tenths of a degree Celsius)
    TEMPERATURE_SUPPLY = 10
    TEMPERATURE_RETURN = 11
    TEMPERATURE_REFERENCE_RETURN = 12
    TEMPERATURE_OUT_EXTERNAL = 13
    TEMPERATURE_HOT_GAS = 14
    TEMPERATURE_OUTSIDE = 15
    TEMPERATURE_OUTSIDE_AVG = 16
    TEMPERATURE_SERVICEWATER = 17
    TEMPERATURE_SERVICEWATER_REFERENCE = 18
    TEMPERATURE_PROBE_IN = 19
    TEMPERATURE_PROBE_OUT = 20
    TEMPERATURE_MK1 = 21
    TEMPERATURE_MK1_REFERENCE = 22
    TEMPERATURE_MK2 = 24
    TEMPERATURE_MK2_REFERENCE = 25
    TEMPERATURE_SOLAR_COLLECTOR = 26
    TEMPERATURE_SOLAR_STORAGE = 27
    TEMPERATURE_EXTERNAL_SOURCE = 28

    # Outputs
    OUTPUT_AV = 37
    OUTPUT_BUP = 38
    OUTPUT_HUP = 39
    OUTPUT_MA1 = 40
    OUTPUT_MZ1 = 41
    OUTPUT_VEN = 42
    OUTPUT_VBO = 43
    OUTPUT_VD1 = 44
    OUTPUT_VD2 = 45
    OUTPUT_ZIP = 46
    OUTPUT_ZUP = 47
    OUTPUT_ZW1 = 48
    OUTPUT_ZW2SST = 49
    OUTPUT_ZW3SST = 50
    OUTPUT_FP2 = 51
    OUTPUT_SLP = 52
    OUTPUT_SUP = 53
    OUTPUT_MZ2 = 54
    OUTPUT_MA2 = 55

    # Runtime counters
    TIME_COMPRESSOR1 = 56
    STARTS_COMPRESSOR1 = 57
    TIME_COMPRESSOR2 = 58
    STARTS_COMPRESSOR2 = 59
    TIME_ZWE1 = 60
    TIME_ZWE2 = 61
    TIME_ZWE3 = 62
    TIME_HEATPUMP = 63
    TIME_HEATING = 64
    TIME_WARMWATER = 65
    TIME_COOLING = 66

    # Fault history
    SWITCHOFF_ERROR_TIMESTAMP_0 = 95
    SWITCHOFF_ERROR_0 = 100
    SWITCHOFF_ERROR_COUNT = 105
    SWITCHOFF_REASON_0 = 106
    SWITCHOFF_REASON_TIMESTAMP_0 = 111

    # State
    HEATPUMP_STATE = 117
    HEATPUMP_EXTENDED_STATE = 119
    HEATPUMP_STATE_TIME = 120

    OUTPUT_MZ3 = 138
    OUTPUT_MA3 = 139
    OUTPUT_FP3 = 140

    # Thermal energies (tenths of a kWh, affected by the firmware sign bug)
    THERMALENERGY_HEATING = 151
    THERMALENERGY_WARMWATER = 152
    THERMALENERGY_POOL = 153
    THERMALENERGY_TOTAL = 154
    MASSFLOW = 155

    OUTPUT_VSK = 166
    OUTPUT_FRH = 167

    # Only reported by newer firmware
    OUTPUT_AV2 = 213
    OUTPUT_VBO2 = 214
    OUTPUT_VD12 = 215
    OUTPUT_VDH2 = 216


class ParameterRegister(IntEnum):
    """Positions in the parameter array."""

    HEATING_TEMPERATURE = 1
    WARMWATER_TEMPERATURE = 2
    HEATING_OPERATION_MODE = 3
    WARMWATER_OPERATION_MODE = 4
    COOLING_OPERATION_MODE = 108
    COOLING_RELEASE_TEMPERATURE = 110
    COOLING_INLET_TEMPERATURE = 132
    COOLING_START_AFTER_HOURS = 850
    COOLING_STOP_AFTER_HOURS = 851


# Entries in each fault history block (errors and switch-off reasons)
FAULT_HISTORY_DEPTH = 5

# Values longer than this carry the extended output block
EXTENDED_THRESHOLD = 213

MIN_VALUES_LENGTH = max(r for r in ValueRegister if r < ValueRegister.OUTPUT_AV2) + 1
EXTENDED_VALUES_LENGTH = ValueRegister.OUTPUT_VDH2 + 1
MIN_PARAMETERS_LENGTH = max(ParameterRegister) + 1

THERMAL_ENERGY_REGISTERS = (
    ValueRegister.THERMALENERGY_HEATING,
    ValueRegister.THERMALENERGY_WARMWATER,
    ValueRegister.THERMALENERGY_POOL,
    ValueRegister.THERMALENERGY_TOTAL,
)

# Firmware reports some thermal energies shifted by this offset
THERMAL_ENERGY_OFFSET = 214748364
