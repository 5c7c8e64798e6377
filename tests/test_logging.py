"""
日志与错误模型测试
"""
from ms_core.utils.errors import NotFoundError, StorageError
from ms_core.utils.logger import LogContext, PIIMaskingProcessor, ShopProcessor, order_id_var


def test_pii_masking():
    masked = PIIMaskingProcessor()(None, "info", {
        "customer": "Ana +1 809555123456",
        "contact": "ana.perez@example.com",
        "nested": {"items": ["+1 809555123456"]},
    })

    assert "555123" not in masked["customer"]
    assert masked["contact"] == "a***@example.com"
    assert "555123" not in masked["nested"]["items"][0]


def test_timestamps_are_not_masked():
    masked = PIIMaskingProcessor()(None, "info", {"ts": "2025-01-01T12:00:00Z"})

    assert masked["ts"] == "2025-01-01T12:00:00Z"


def test_shop_processor_adds_context():
    with LogContext(trace_id="t-1", order_id="o-1"):
        event = ShopProcessor()(None, "info", {"event": "Order created"})

    assert event["action"] == "Order created"
    assert event["trace_id"] == "t-1"
    assert event["order_id"] == "o-1"
    assert order_id_var.get() is None


def test_text_format_keeps_event_key():
    event = ShopProcessor(rename_event=False)(None, "info", {"event": "Order created"})

    assert event["event"] == "Order created"


def test_problem_detail():
    data = NotFoundError(code="ORDER_NOT_FOUND", resource="Order x").to_dict()

    assert data == {
        "ok": False,
        "error": {
            "type": "about:blank",
            "title": "Not Found",
            "status": 404,
            "detail": "Order x not found",
            "code": "ORDER_NOT_FOUND",
        },
    }


def test_problem_detail_extra_fields():
    problem = StorageError(detail="disk full", key="musicshop_orders").to_problem_detail()

    assert problem.status == 500
    assert problem.model_dump()["key"] == "musicshop_orders"
