"""
Tests for health checks, metrics exposition, request middleware and log masking
"""
import json
import logging
from unittest.mock import patch
from uuid import uuid4

from sqlalchemy.exc import OperationalError

from app.core.logging_config import (ContextualFormatter, LoggingConfig,
                                     SensitiveDataFilter)
from app.core.middleware_metrics import normalize_endpoint


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_detailed_health(client):
    response = client.get("/health/detailed")

    assert response.status_code == 200
    assert response.json()["components"]["database"]["status"] == "healthy"


def test_detailed_health_reports_log_counts(client):
    LoggingConfig.reset_metrics()
    app_logger = logging.getLogger("app.tests.health")
    app_logger.error("first failure")
    app_logger.error("second failure")

    response = client.get("/health/detailed")

    counts = response.json()["log_counts"]
    assert counts["ERROR"] == 2
    assert set(counts) == {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def test_detailed_health_reports_database_failure(client, db):
    with patch.object(db, "execute", side_effect=OperationalError("SELECT 1", {}, Exception("down"))):
        response = client.get("/health/detailed")

    assert response.status_code == 503
    assert response.json()["components"]["database"]["error"] == "OperationalError"


def test_metrics_endpoint_exposes_http_counters(client):
    client.get("/health")

    response = client.get("/metrics")

    assert response.status_code == 200
    assert "http_requests_total" in response.text
    assert "vendor_twilio_sms_update_total" in response.text


def test_request_id_is_echoed(client):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})

    assert response.headers["X-Request-ID"] == "req-123"


def test_request_id_is_generated(client):
    assert client.get("/health").headers.get("X-Request-ID")


def test_normalize_endpoint_collapses_ids():
    workspace_id = uuid4()

    assert normalize_endpoint(f"/api/v3/admin/workspaces/{workspace_id}/title") == \
        "/api/v3/admin/workspaces/{id}/title"


class TestSensitiveDataFilter:

    def _record(self, msg, args=None):
        return logging.LogRecord("test", logging.INFO, __file__, 1, msg, args, None)

    def test_masks_secrets_in_message(self):
        record = self._record('login with password="hunter22" and Bearer abc.def')

        SensitiveDataFilter().filter(record)

        assert "hunter22" not in record.msg
        assert "abc.def" not in record.msg

    def test_masks_twilio_signature(self):
        record = self._record("headers x-twilio-signature=Zm9vYmFy")

        SensitiveDataFilter().filter(record)

        assert "Zm9vYmFy" not in record.msg

    def test_masks_string_args(self):
        record = self._record("%s", ("token=s3cr3t",))

        SensitiveDataFilter().filter(record)

        assert "s3cr3t" not in record.getMessage()

    def test_disabled_filter_leaves_record(self):
        record = self._record("password=hunter22")

        SensitiveDataFilter(enabled=False).filter(record)

        assert record.msg == "password=hunter22"


def test_contextual_formatter_merges_context_and_extra():
    LoggingConfig.set_context(request_id="req-1")
    try:
        record = logging.LogRecord("app.test", logging.INFO, __file__, 1, "hello", None, None)
        record.action = "create_workspace"

        output = json.loads(ContextualFormatter().format(record))
    finally:
        LoggingConfig.clear_context()

    assert output["message"] == "hello"
    assert output["request_id"] == "req-1"
    assert output["action"] == "create_workspace"
