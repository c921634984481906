from typing import Protocol

from heatpump_link.domain.snapshots import RegisterSnapshot
from heatpump_link.domain.state import SessionState


class StatusSinkPort(Protocol):
    async def publish_snapshot(self, snapshot: RegisterSnapshot) -> None:
        """
        Publish the decoded values and parameters of one refresh cycle.
        """
        ...

    async def update_status(self, state: SessionState) -> None:
        """
        Publish a connectivity status transition.
        """
        ...
