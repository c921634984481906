from typing import Protocol, Sequence


class HeatpumpConnectorPort(Protocol):
    async def connect(self) -> None:
        """
        Open the transport session to the device.
        """
        ...

    async def read_values(self) -> Sequence[int]:
        """
        Read the measured value array.
        """
        ...

    async def read_parameters(self) -> Sequence[int]:
        """
        Read the parameter array.
        """
        ...

    async def write_parameter(self, index: int, value: int) -> None:
        """
        Write a single parameter. Raises if the device does not acknowledge it.
        """
        ...

    async def close(self) -> None:
        """
        Close the session. Must be idempotent and never raise.
        """
        ...


class ConnectorFactory(Protocol):
    def __call__(self, host: str, port: int, timeout: float) -> HeatpumpConnectorPort:
        """
        Create an unopened connector for one request/response cycle.
        """
        ...
