from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class DeviceStatus(str, Enum):
    UNKNOWN = "unknown"
    ONLINE = "online"
    OFFLINE = "offline"


class SessionState(BaseModel):
    """Connectivity of one device. Replaced as a whole on every transition."""

    model_config = ConfigDict(frozen=True)

    status: DeviceStatus = DeviceStatus.UNKNOWN
    detail: Optional[str] = None
    last_success: Optional[datetime] = None
