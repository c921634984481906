import logging
from typing import Optional

from heatpump_link.domain.snapshots import RegisterSnapshot
from heatpump_link.domain.state import DeviceStatus, SessionState

logger = logging.getLogger(__name__)


class LoggingStatusSink:
    """Status sink that writes snapshots and status transitions to the log."""

    def __init__(self):
        self.last_snapshot: Optional[RegisterSnapshot] = None
        self.last_state: Optional[SessionState] = None

    async def publish_snapshot(self, snapshot: RegisterSnapshot) -> None:
        self.last_snapshot = snapshot
        values = snapshot.values
        logger.info(
            f"Heatpump: supply {values.supply_temperature}°C, return {values.return_temperature}°C, "
            f"outside {values.outside_temperature}°C, hot water {values.servicewater_temperature}°C, "
            f"state {values.heatpump_state}"
        )
        for channel, state in snapshot.channel_states().items():
            logger.debug(f"{channel} = {state}")

    async def update_status(self, state: SessionState) -> None:
        self.last_state = state
        if state.status is DeviceStatus.OFFLINE:
            logger.warning(f"Heatpump offline: {state.detail}")
        else:
            logger.info(f"Heatpump status: {state.status.value}")
