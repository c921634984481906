import logging

import pytest

from heatpump_link.adapters.logging_sink import LoggingStatusSink
from heatpump_link.domain.snapshots import RegisterSnapshot
from heatpump_link.domain.state import DeviceStatus, SessionState
from heatpump_link.services.decoder import decode


class TestLoggingStatusSink:
    """Test suite for the LoggingStatusSink class."""

    @pytest.fixture
    def sink(self):
        return LoggingStatusSink()

    @pytest.fixture
    def snapshot(self, values, parameters):
        values[10] = 215
        value_snapshot, parameter_snapshot = decode(values, parameters)
        return RegisterSnapshot(values=value_snapshot, parameters=parameter_snapshot)

    @pytest.mark.asyncio
    async def test_publish_snapshot(self, sink, snapshot, caplog):
        with caplog.at_level(logging.DEBUG, logger="heatpump_link.adapters.logging_sink"):
            await sink.publish_snapshot(snapshot)

        assert sink.last_snapshot is snapshot
        assert "supply 21.5°C" in caplog.text
        assert "supply_temperature = 21.5" in caplog.text
        assert "output_av2" not in caplog.text

    @pytest.mark.asyncio
    async def test_offline_logged_as_warning(self, sink, caplog):
        state = SessionState(status=DeviceStatus.OFFLINE, detail="connection refused")

        with caplog.at_level(logging.INFO, logger="heatpump_link.adapters.logging_sink"):
            await sink.update_status(state)

        assert sink.last_state is state
        assert caplog.records[-1].levelno == logging.WARNING
        assert "connection refused" in caplog.text

    @pytest.mark.asyncio
    async def test_online_logged_as_info(self, sink, caplog):
        with caplog.at_level(logging.INFO, logger="heatpump_link.adapters.logging_sink"):
            await sink.update_status(SessionState(status=DeviceStatus.ONLINE))

        assert caplog.records[-1].levelno == logging.INFO
        assert "online" in caplog.text
