from datetime import datetime, timezone
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class FaultEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: int
    timestamp: datetime  # Local system time zone


class ValueSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    # Temperatures (degrees Celsius)
    supply_temperature: float
    return_temperature: float
    reference_return_temperature: float
    out_external_temperature: float
    hot_gas_temperature: float
    outside_temperature: float
    outside_avg_temperature: float
    servicewater_temperature: float
    servicewater_reference_temperature: float
    probe_in_temperature: float
    probe_out_temperature: float
    mk1_temperature: float
    mk1_reference_temperature: float
    mk2_temperature: float
    mk2_reference_temperature: float
    solar_collector_temperature: float
    solar_storage_temperature: float
    external_source_temperature: float

    # Runtime counters (raw device units)
    time_compressor1: int
    starts_compressor1: int
    time_compressor2: int
    starts_compressor2: int
    time_zwe1: int
    time_zwe2: int
    time_zwe3: int
    time_heatpump: int
    time_heating: int
    time_warmwater: int
    time_cooling: int

    # Thermal energies (kWh)
    thermal_energy_heating: float
    thermal_energy_warmwater: float
    thermal_energy_pool: float
    thermal_energy_total: float
    massflow: int

    # State
    heatpump_state: int
    heatpump_extended_state: int
    heatpump_state_time: int

    # Fault history, most recent entry first as reported by the device
    switchoff_errors: Tuple[FaultEntry, ...]
    switchoff_error_count: int
    switchoff_reasons: Tuple[FaultEntry, ...]

    # Outputs
    output_av: bool
    output_bup: bool
    output_hup: bool
    output_ma1: bool
    output_mz1: bool
    output_ven: bool
    output_vbo: bool
    output_vd1: bool
    output_vd2: bool
    output_zip: bool
    output_zup: bool
    output_zw1: bool
    output_zw2sst: bool
    output_zw3sst: bool
    output_fp2: bool
    output_slp: bool
    output_sup: bool
    output_mz2: bool
    output_ma2: bool
    output_mz3: bool
    output_ma3: bool
    output_fp3: bool
    output_vsk: bool
    output_frh: bool

    # Extended outputs, None when the firmware does not report them
    output_av2: Optional[bool] = None
    output_vbo2: Optional[bool] = None
    output_vd12: Optional[bool] = None
    output_vdh2: Optional[bool] = None

    @property
    def has_extended_outputs(self) -> bool:
        return self.output_av2 is not None


class ParameterSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    # Operating modes
    heating_operation_mode: int
    warmwater_operation_mode: int
    cooling_operation_mode: int

    # Setpoints (degrees Celsius)
    heating_temperature: float
    warmwater_temperature: float
    cooling_release_temperature: float
    cooling_inlet_temperature: float

    # Cooling schedule offsets (hours)
    cooling_start_after_hours: float
    cooling_stop_after_hours: float


class RegisterSnapshot(BaseModel):
    """Values and parameters read during one refresh cycle."""

    model_config = ConfigDict(frozen=True)

    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    values: ValueSnapshot
    parameters: ParameterSnapshot

    def channel_states(self) -> dict:
        """
        Flattens both snapshots into named channel values.
        Extended outputs the device does not report are left out.
        """
        states = self.values.model_dump(exclude_none=True)
        states.update(self.parameters.model_dump())
        return states
