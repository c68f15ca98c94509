"""日志脱敏的测试"""

from utils.logging import SensitiveFilter, mask_sensitive_data


class TestMaskSensitiveData:
    """敏感信息脱敏"""

    def test_authorization_header(self):
        masked = mask_sensitive_data("headers: {'Authorization': 'eyJhbGciOi.abc'}")
        assert "eyJhbGciOi" not in masked
        assert "***MASKED***" in masked

    def test_device_id(self):
        masked = mask_sensitive_data('{"deviceId": "ABCD-1234"}')
        assert "ABCD-1234" not in masked

    def test_push_keys_in_query(self):
        masked = mask_sensitive_data("GET /message/push?pushkey=PDU123&text=hi")
        assert "PDU123" not in masked
        assert "text=hi" in masked

    def test_plain_text_untouched(self):
        text = "[账号1] 签到成功 连续签到天数: 3天"
        assert mask_sensitive_data(text) == text


class TestSensitiveFilter:
    """loguru 过滤器"""

    def test_filter_rewrites_record(self):
        record = {"message": "token=secret-value"}
        assert SensitiveFilter()(record) is True
        assert record["message"] == "token=***MASKED***"
