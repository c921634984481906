import asyncio
import functools
import importlib
import logging
import sys
from typing import Optional

from pydantic import ValidationError

from heatpump_link.config import settings
from heatpump_link.adapters.logging_sink import LoggingStatusSink
from heatpump_link.ports.connector import ConnectorFactory
from heatpump_link.services.handler import HeatpumpHandler

# Setup logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def load_connector_factory(path: str) -> ConnectorFactory:
    """
    Resolves a "package.module:attribute" path to a connector factory.
    """
    module_name, _, attribute = path.partition(":")
    if not module_name or not attribute:
        raise ValueError(f"Connector factory '{path}' must look like 'package.module:attribute'")

    factory = getattr(importlib.import_module(module_name), attribute)
    if not callable(factory):
        raise TypeError(f"Connector factory '{path}' is not callable")
    return factory


async def main(stop_event: Optional[asyncio.Event] = None) -> None:
    logger.info(f"Starting Heat Pump Link Daemon (Mode: {settings.COLLECTOR_MODE})")

    try:
        config = settings.heatpump_config()
    except ValidationError as e:
        logger.error(f"Invalid heatpump configuration: {e}")
        sys.exit(1)

    # 1. Instantiate Connector
    mode = settings.COLLECTOR_MODE.lower()

    if mode == "production":
        try:
            connector_factory = load_connector_factory(settings.HEATPUMP_CONNECTOR)
        except Exception as e:
            logger.error(f"Failed to load heatpump connector: {e}")
            sys.exit(1)
    else:
        logger.info("Running in MOCK mode. Using a simulated heat pump.")
        from heatpump_link.adapters.mocks import MockHeatpumpConnector, SimulatedHeatpump

        connector_factory = functools.partial(MockHeatpumpConnector, device=SimulatedHeatpump())

    # 2. Instantiate Handler
    handler = HeatpumpHandler(config, connector_factory, LoggingStatusSink())

    # 3. Run until stopped
    stop_event = stop_event or asyncio.Event()
    try:
        await handler.initialize()
        await stop_event.wait()
    except asyncio.CancelledError:
        logger.info("Daemon stopping...")
    finally:
        await handler.dispose()


def run() -> None:
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    run()
