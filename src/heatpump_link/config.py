from pydantic_settings import BaseSettings, SettingsConfigDict

from heatpump_link.domain.configuration import HeatpumpConfig


class Settings(BaseSettings):
    # General
    LOG_LEVEL: str = "INFO"
    COLLECTOR_MODE: str = "mock"

    # Heat pump
    HEATPUMP_HOST: str = "localhost"
    HEATPUMP_PORT: int = 8889
    HEATPUMP_CONNECTION_TIMEOUT: int = 5
    HEATPUMP_POLL_INTERVAL: int = 60

    # Connector factory used in production mode, as "package.module:attribute"
    HEATPUMP_CONNECTOR: str = ""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    def heatpump_config(self) -> HeatpumpConfig:
        """
        Builds the validated, immutable device configuration.
        """
        return HeatpumpConfig(
            host=self.HEATPUMP_HOST,
            port=self.HEATPUMP_PORT,
            connection_timeout=self.HEATPUMP_CONNECTION_TIMEOUT,
            polling_interval=self.HEATPUMP_POLL_INTERVAL,
        )


settings = Settings()
