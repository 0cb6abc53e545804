import logging

from statuspage.core.structured_logging import build_log_context, configure_logging


def test_build_log_context_omits_empty_values():
    ctx = build_log_context(user_id="user_1", org_id=None, request_id="", route="/api/services")
    assert ctx == {"user_id": "user_1", "route": "/api/services"}


def test_build_log_context_stringifies_org_id():
    import uuid

    org_id = uuid.uuid4()
    ctx = build_log_context(org_id=org_id, method="GET")
    assert ctx == {"org_id": str(org_id), "method": "GET"}


def test_log_context_attaches_to_records(caplog):
    logger = logging.getLogger("statuspage.tests")
    with caplog.at_level(logging.INFO):
        logger.info("hello", extra=build_log_context(request_id="req-1"))
    assert caplog.records[-1].request_id == "req-1"


def test_configure_logging_accepts_lowercase_level():
    configure_logging("debug")
