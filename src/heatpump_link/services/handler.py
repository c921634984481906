import logging
from typing import Union

from pydantic import ValidationError

from heatpump_link.domain.commands import Command, CommandValue, RefreshCommand
from heatpump_link.domain.configuration import HeatpumpConfig
from heatpump_link.domain.exceptions import OutOfRangeError, UnsupportedCommandTypeError
from heatpump_link.domain.state import SessionState
from heatpump_link.ports.connector import ConnectorFactory
from heatpump_link.ports.status_sink import StatusSinkPort
from heatpump_link.services.encoder import resolve_target
from heatpump_link.services.scheduler import PollingScheduler
from heatpump_link.services.session import DeviceSession

logger = logging.getLogger(__name__)


class HeatpumpHandler:
    """
    Connects to a Luxtronik/Novelan heat pump, reads its value and parameter
    arrays every polling interval and forwards commands as parameter writes.
    """

    def __init__(self, config: HeatpumpConfig, connector_factory: ConnectorFactory, sink: StatusSinkPort):
        self.config = config
        self.session = DeviceSession(config, connector_factory, sink)
        self.scheduler = PollingScheduler(config.polling_interval, self.session.refresh, name="refresh")

    @property
    def address(self) -> str:
        return self.config.address

    @property
    def state(self) -> SessionState:
        return self.session.state

    async def initialize(self) -> None:
        logger.info(f"Initializing heatpump handler for {self.address}")
        await self.session.initialize()
        self.scheduler.start()

    async def handle_command(self, channel_id: str, command: Union[Command, CommandValue, RefreshCommand]) -> bool:
        """
        Dispatches a command received on a channel.
        Returns True if it was written to the heat pump.
        """
        if isinstance(command, RefreshCommand):
            # Refresh is done in scheduled refresh
            return False

        target = resolve_target(channel_id)
        if target is None:
            logger.debug(f"Ignoring command for channel {channel_id} without a heatpump parameter")
            return False

        try:
            if not isinstance(command, Command):
                command = Command(value=command)
            return await self.session.send_command(target, command)
        except ValidationError:
            logger.warning(f"Heatpump command for channel {channel_id} has an unsupported value {command!r}")
        except (UnsupportedCommandTypeError, OutOfRangeError) as e:
            logger.warning(f"Heatpump command for channel {channel_id} rejected: {e}")
        return False

    async def dispose(self) -> None:
        # Dispose first so a refresh still in flight does not publish
        self.session.dispose()
        await self.scheduler.stop()
        logger.info(f"Disposed heatpump handler for {self.address}")
