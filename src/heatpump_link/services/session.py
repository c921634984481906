import asyncio
import logging
import socket
from contextlib import asynccontextmanager, contextmanager
from typing import AsyncIterator, Awaitable, Iterator, Optional, Sequence, Tuple, TypeVar

from heatpump_link.domain.commands import Command, CommandTarget
from heatpump_link.domain.configuration import HeatpumpConfig
from heatpump_link.domain.exceptions import (
    AddressResolutionError,
    HeatpumpError,
    MalformedPayloadError,
    TransportIOError,
    TransportTimeoutError,
)
from heatpump_link.domain.snapshots import RegisterSnapshot
from heatpump_link.domain.state import DeviceStatus, SessionState
from heatpump_link.ports.connector import ConnectorFactory, HeatpumpConnectorPort
from heatpump_link.ports.status_sink import StatusSinkPort
from heatpump_link.services.decoder import decode
from heatpump_link.services.encoder import encode

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DeviceSession:
    """
    Runs refresh and command cycles against one heat pump.

    The device only handles one request/response exchange at a time, so every
    cycle holds the I/O lock from opening the connector until it is closed.
    Decoding and publishing happen after the lock is released.
    """

    def __init__(self, config: HeatpumpConfig, connector_factory: ConnectorFactory, sink: StatusSinkPort):
        self.config = config
        self.connector_factory = connector_factory
        self.sink = sink
        self._lock = asyncio.Lock()
        self._state = SessionState()
        self._initialized = False
        self._disposed = False
        # Refresh cycles are numbered in lock order
        self._cycle = 0
        self._committed_cycle = 0

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def initialized(self) -> bool:
        """True once a refresh cycle has succeeded."""
        return self._initialized

    @property
    def disposed(self) -> bool:
        return self._disposed

    async def initialize(self) -> None:
        """
        Reports the UNKNOWN status the session starts in.
        """
        self._state = SessionState()
        await self.sink.update_status(self._state)

    def dispose(self) -> None:
        """
        Stops all further publications and status transitions.
        An exchange already in flight runs to completion but its result is dropped.
        """
        self._disposed = True

    async def refresh(self) -> Optional[RegisterSnapshot]:
        """
        Reads values and parameters, decodes them and publishes the snapshot.
        Returns the published snapshot, or None if nothing was published.
        """
        if self._disposed:
            return None

        cycle = None
        try:
            async with self._lock:
                self._cycle += 1
                cycle = self._cycle
                values, parameters = await self._read_registers()
        except AddressResolutionError as e:
            await self._on_read_failure(
                cycle, f"The given address '{self.config.address}' of the heatpump is unknown", e, str(e)
            )
            return None
        except TransportIOError as e:
            await self._on_read_failure(
                cycle, f"Couldn't establish network connection [address '{self.config.address}']", e, str(e)
            )
            return None
        except MalformedPayloadError as e:
            logger.error(f"Discarding malformed payload from heatpump {self.config.address}: {e}")
            return None
        except Exception as e:
            await self._on_read_failure(
                cycle, f"Unexpected error while reading heatpump {self.config.address}", e, None, exc_info=True
            )
            return None

        try:
            value_snapshot, parameter_snapshot = decode(values, parameters)
        except MalformedPayloadError as e:
            # Status stays as it was
            logger.error(f"Discarding malformed payload from heatpump {self.config.address}: {e}")
            return None

        if self._disposed:
            logger.debug(f"Session for {self.config.address} disposed, dropping refresh result")
            return None
        if self._is_stale(cycle):
            logger.debug(f"Dropping result of superseded refresh cycle {cycle} from {self.config.address}")
            return None

        snapshot = RegisterSnapshot(values=value_snapshot, parameters=parameter_snapshot)
        await self.sink.publish_snapshot(snapshot)

        self._initialized = True
        await self._transition(cycle, SessionState(status=DeviceStatus.ONLINE, last_success=snapshot.timestamp))
        return snapshot

    async def send_command(self, target: CommandTarget, command: Command) -> bool:
        """
        Encodes a command and writes it to the device.

        Encoding errors propagate to the caller. Transport failures are logged
        and reported as False; they never change the session state, since a
        failed write does not mean the device is offline.
        """
        register, value = encode(target, command)

        if self._disposed:
            logger.debug(f"Session for {self.config.address} disposed, ignoring {target.value}")
            return False

        try:
            async with self._lock:
                async with self._connect() as connector:
                    await self._bounded(connector.write_parameter(int(register), value))
        except AddressResolutionError:
            logger.warning(f"The given address '{self.config.address}' of the heatpump is unknown")
            return False
        except TransportIOError as e:
            logger.warning(f"Couldn't establish network connection [address '{self.config.address}']: {e}")
            return False

        logger.info(f"Set {target.value} to {value} (parameter {int(register)}) on heatpump {self.config.address}")
        return True

    async def _read_registers(self) -> Tuple[Sequence[int], Sequence[int]]:
        async with self._connect() as connector:
            # Values first; if either read fails nothing is published
            values = await self._bounded(connector.read_values())
            parameters = await self._bounded(connector.read_parameters())
        logger.debug(f"Read {len(values)} values and {len(parameters)} parameters from {self.config.address}")
        return values, parameters

    @asynccontextmanager
    async def _connect(self) -> AsyncIterator[HeatpumpConnectorPort]:
        with self._mapped_errors():
            connector = self.connector_factory(self.config.host, self.config.port, self.config.connection_timeout)
        try:
            await self._bounded(connector.connect())
            yield connector
        finally:
            await connector.close()

    async def _bounded(self, awaitable: Awaitable[T]) -> T:
        """
        Awaits a connector call within the connection timeout.
        """
        with self._mapped_errors():
            return await asyncio.wait_for(awaitable, timeout=self.config.connection_timeout)

    @contextmanager
    def _mapped_errors(self) -> Iterator[None]:
        """
        Maps low-level socket errors onto the transport exceptions.
        """
        try:
            yield
        except HeatpumpError:
            raise
        except asyncio.TimeoutError as e:
            raise TransportTimeoutError(
                f"No response from {self.config.address} within {self.config.connection_timeout}s"
            ) from e
        except socket.gaierror as e:
            raise AddressResolutionError(str(e)) from e
        except OSError as e:
            raise TransportIOError(str(e) or type(e).__name__) from e

    async def _on_read_failure(
        self,
        cycle: Optional[int],
        message: str,
        error: Exception,
        detail: Optional[str],
        exc_info: bool = False,
    ) -> None:
        if not self._initialized:
            # Startup races must not flip the status to OFFLINE
            logger.debug(f"{message} (not initialized yet): {error}", exc_info=exc_info)
            return

        if exc_info:
            logger.error(f"{message}: {error}", exc_info=True)
        else:
            logger.warning(f"{message}: {error}")
        await self._transition(
            cycle,
            SessionState(
                status=DeviceStatus.OFFLINE,
                detail=detail,
                last_success=self._state.last_success,
            ),
        )

    def _is_stale(self, cycle: Optional[int]) -> bool:
        return cycle is not None and cycle < self._committed_cycle

    async def _transition(self, cycle: Optional[int], state: SessionState) -> None:
        if self._disposed or self._is_stale(cycle):
            return
        if cycle is not None:
            self._committed_cycle = cycle
        previous, self._state = self._state, state
        # Only status changes are reported, not every new last_success
        if (state.status, state.detail) != (previous.status, previous.detail):
            await self.sink.update_status(state)
