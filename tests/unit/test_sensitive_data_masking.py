import pytest

pytestmark = pytest.mark.unit


class TestSensitiveDataMasking:
    def test_password_masked(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "test", "data": "password='s3cret123'"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "s3cret123" not in result["data"]
        assert "***MASKED***" in result["data"]

    def test_token_masked(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "test", "header": "token=abc123xyz"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "abc123xyz" not in result["header"]
        assert "***MASKED***" in result["header"]

    def test_job_secret_masked(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "test", "header": "x-job-secret: hunter2"}
        result = mask_sensitive_data(None, None, event_dict)
        assert "hunter2" not in result["header"]

    def test_barcodes_unchanged(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "product.created", "gtin": "7891234567895"}
        result = mask_sensitive_data(None, None, event_dict)
        assert result["gtin"] == "7891234567895"

    def test_non_sensitive_data_unchanged(self):
        from config.settings import mask_sensitive_data

        event_dict = {"event": "product.created", "sku": "MON-27"}
        result = mask_sensitive_data(None, None, event_dict)
        assert result["sku"] == "MON-27"
        assert result["event"] == "product.created"
