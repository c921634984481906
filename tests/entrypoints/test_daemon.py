import asyncio
import functools
import logging
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from heatpump_link.adapters.logging_sink import LoggingStatusSink
from heatpump_link.adapters.mocks import MockHeatpumpConnector
from heatpump_link.config import Settings
from heatpump_link.entrypoints.daemon import load_connector_factory, main
from heatpump_link.services.handler import HeatpumpHandler


def _stopped_event() -> asyncio.Event:
    event = asyncio.Event()
    event.set()
    return event


class TestDaemonMain:
    """Test suite for the daemon main() function."""

    @pytest.fixture
    def mock_settings_mock(self):
        """Settings for mock mode."""
        settings = Settings(_env_file=None, COLLECTOR_MODE="mock", HEATPUMP_HOST="heatpump", HEATPUMP_POLL_INTERVAL=1)
        with patch("heatpump_link.entrypoints.daemon.settings", settings):
            yield settings

    @pytest.fixture
    def mock_settings_production(self):
        """Settings for production mode with an importable connector factory."""
        settings = Settings(
            _env_file=None,
            COLLECTOR_MODE="production",
            HEATPUMP_HOST="heatpump",
            HEATPUMP_CONNECTOR="heatpump_link.adapters.mocks:MockHeatpumpConnector",
        )
        with patch("heatpump_link.entrypoints.daemon.settings", settings):
            yield settings

    @pytest.fixture
    def mock_handler(self):
        """Mock HeatpumpHandler."""
        with patch("heatpump_link.entrypoints.daemon.HeatpumpHandler") as mock:
            handler_instance = MagicMock(spec=HeatpumpHandler)
            handler_instance.initialize = AsyncMock()
            handler_instance.dispose = AsyncMock()
            mock.return_value = handler_instance
            yield mock

    @pytest.mark.asyncio
    async def test_main_mock_mode_initialization(self, mock_settings_mock, mock_handler):
        """Test that mock mode wires a simulated connector and a logging sink."""
        await main(stop_event=_stopped_event())

        mock_handler.assert_called_once()
        config, factory, sink = mock_handler.call_args.args
        assert config.host == "heatpump"
        assert config.polling_interval == 1
        assert isinstance(factory, functools.partial)
        assert factory.func is MockHeatpumpConnector
        assert isinstance(sink, LoggingStatusSink)
        mock_handler.return_value.initialize.assert_awaited_once()
        mock_handler.return_value.dispose.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_main_production_mode_loads_connector(self, mock_settings_production, mock_handler):
        """Test that production mode resolves the configured connector factory."""
        await main(stop_event=_stopped_event())

        _, factory, _ = mock_handler.call_args.args
        assert factory is MockHeatpumpConnector

    @pytest.mark.asyncio
    async def test_main_production_mode_bad_connector(self, mock_settings_production, mock_handler):
        """Test that the daemon exits when the connector factory cannot be loaded."""
        mock_settings_production.HEATPUMP_CONNECTOR = "does.not.exist:Connector"

        with pytest.raises(SystemExit) as exc_info:
            await main(stop_event=_stopped_event())

        assert exc_info.value.code == 1
        mock_handler.assert_not_called()

    @pytest.mark.asyncio
    async def test_main_invalid_config(self, mock_settings_mock, mock_handler):
        """Test that the daemon exits on an invalid device configuration."""
        mock_settings_mock.HEATPUMP_PORT = 0

        with pytest.raises(SystemExit) as exc_info:
            await main(stop_event=_stopped_event())

        assert exc_info.value.code == 1

    @pytest.mark.asyncio
    async def test_main_cancelled_disposes_handler(self, mock_settings_mock, mock_handler):
        """Test that cancelling the daemon still disposes the handler."""
        task = asyncio.create_task(main())
        await asyncio.sleep(0.01)

        task.cancel()
        await task

        mock_handler.return_value.dispose.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_main_polls_simulated_heatpump(self, mock_settings_mock, caplog):
        """Test a short daemon run against the simulated heat pump."""
        stop_event = asyncio.Event()

        async def stop_soon():
            await asyncio.sleep(0.05)
            stop_event.set()

        with caplog.at_level(logging.INFO):
            await asyncio.gather(main(stop_event=stop_event), stop_soon())

        assert "Heatpump status: online" in caplog.text
        assert "Heatpump: supply" in caplog.text


class TestLoadConnectorFactory:
    """Test suite for resolving connector factory paths."""

    def test_valid_path(self):
        assert load_connector_factory("heatpump_link.adapters.mocks:MockHeatpumpConnector") is MockHeatpumpConnector

    @pytest.mark.parametrize("path", ["", "heatpump_link.adapters.mocks", ":MockHeatpumpConnector"])
    def test_malformed_path(self, path):
        with pytest.raises(ValueError):
            load_connector_factory(path)

    def test_missing_module(self):
        with pytest.raises(ImportError):
            load_connector_factory("does.not.exist:Connector")

    def test_not_callable(self):
        with pytest.raises(TypeError):
            load_connector_factory("heatpump_link.domain.registers:EXTENDED_THRESHOLD")
