import logging
import uuid

import pytest

pytestmark = pytest.mark.integration


class TestTraceIdMiddleware:
    def test_returns_provided_trace_id(self, client):
        response = client.get("/health", HTTP_X_TRACE_ID="trace-123")
        assert response["X-Trace-ID"] == "trace-123"
        assert response["X-Request-ID"] == "trace-123"

    def test_accepts_legacy_request_id(self, client):
        response = client.get("/health", HTTP_X_REQUEST_ID="legacy-456")
        assert response["X-Trace-ID"] == "legacy-456"

    def test_generates_uuid_when_absent(self, client):
        trace_id = client.get("/health")["X-Trace-ID"]
        assert str(uuid.UUID(trace_id, version=4)) == trace_id

    def test_error_envelope_echoes_trace_id(self, api_client):
        response = api_client.get("/api/v1/products/", HTTP_X_TRACE_ID="trace-err")
        assert response.json()["traceId"] == "trace-err"

    def test_trace_id_in_logs(self, client, caplog):
        with caplog.at_level(logging.INFO):
            client.get("/health", HTTP_X_TRACE_ID="log-trace-789")
        assert any("log-trace-789" in record.getMessage() for record in caplog.records), (
            f"trace_id not found in log records: {[r.getMessage() for r in caplog.records]}"
        )
