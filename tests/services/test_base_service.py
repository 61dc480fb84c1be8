import logging

import pytest

from app.services.base import BaseService
from app.services.logger import LogEventPayload, LogOptions


class OrderService(BaseService):
    def __init__(self, logger):
        super().__init__("OrderService", logger)

    def cancel(self, order_id: int) -> None:
        self.logger.warn(
            "Order cancelled",
            LogEventPayload(context="OrderService", metadata={"order_id": order_id}, options=LogOptions(save_to_db=True)),
        )


@pytest.mark.asyncio
async def test_service_logs_under_its_name(caplog, structured_logger, log_sink):
    caplog.set_level(logging.DEBUG)
    service = OrderService(structured_logger)

    service.cancel(42)
    await structured_logger.drain()

    assert caplog.records[0].name == "OrderService"
    assert log_sink.records[0].metadata == {"order_id": 42}
