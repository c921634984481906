"""Errors raised while talking to the heat pump.

Transport failures (address resolution, I/O, timeouts) are recovered by the
device session, command errors reject a single command, and malformed
payloads skip publication for one refresh cycle.
"""


class HeatpumpError(Exception):
    """Base exception for all heat pump errors."""

    pass


class AddressResolutionError(HeatpumpError):
    """The configured host could not be resolved."""

    pass


class TransportIOError(HeatpumpError):
    """Connecting to or exchanging data with the device failed."""

    pass


class TransportTimeoutError(TransportIOError):
    """A connector operation did not finish within the connection timeout."""

    pass


class MalformedPayloadError(HeatpumpError):
    """A register array is too short or otherwise cannot be decoded."""

    pass


class CommandError(HeatpumpError):
    """Base exception for commands rejected before reaching the device."""

    def __init__(self, target: str, value: object, message: str) -> None:
        self.target = target
        self.value = value
        super().__init__(message)


class UnsupportedCommandTypeError(CommandError):
    """The command value has the wrong type for its target."""

    pass


class OutOfRangeError(CommandError):
    """An enumerated command value lies outside the target's valid range."""

    pass
