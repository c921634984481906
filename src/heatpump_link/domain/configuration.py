from pydantic import BaseModel, ConfigDict, Field


class HeatpumpConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    host: str = Field(min_length=1)
    port: int = Field(default=8889, ge=1, le=65535)

    # Seconds
    connection_timeout: int = Field(default=5, gt=0)
    polling_interval: int = Field(default=60, gt=0)

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"
