"""
Unit tests for retry module.
"""

from unittest.mock import AsyncMock, Mock

import httpx
import pytest

from farescope.utils.retry import API_RETRIABLE_EXCEPTIONS, api_retry


class TestApiRetry:
    """Tests for api_retry decorator."""

    def test_success_first_attempt(self):
        mock_func = Mock(return_value="success")

        @api_retry(max_attempts=3, min_wait_seconds=0)
        def test_func():
            return mock_func()

        assert test_func() == "success"
        assert mock_func.call_count == 1

    def test_retries_connection_errors(self):
        mock_func = Mock(side_effect=[ConnectionError("fail"), "success"])

        @api_retry(max_attempts=3, min_wait_seconds=0)
        def test_func():
            return mock_func()

        assert test_func() == "success"
        assert mock_func.call_count == 2

    def test_reraises_after_last_attempt(self):
        mock_func = Mock(side_effect=TimeoutError("always fails"))

        @api_retry(max_attempts=3, min_wait_seconds=0)
        def test_func():
            return mock_func()

        with pytest.raises(TimeoutError):
            test_func()

        assert mock_func.call_count == 3

    def test_does_not_retry_other_errors(self):
        mock_func = Mock(side_effect=ValueError("bad input"))

        @api_retry(max_attempts=3, min_wait_seconds=0)
        def test_func():
            return mock_func()

        with pytest.raises(ValueError):
            test_func()

        assert mock_func.call_count == 1

    def test_max_attempts_floor(self):
        mock_func = Mock(side_effect=ConnectionError("fail"))

        @api_retry(max_attempts=0, min_wait_seconds=0)
        def test_func():
            return mock_func()

        with pytest.raises(ConnectionError):
            test_func()

        assert mock_func.call_count == 1

    @pytest.mark.asyncio
    async def test_async_httpx_errors_are_retried(self):
        mock_func = AsyncMock(side_effect=[httpx.ReadTimeout("slow"), httpx.ConnectError("refused"), "ok"])

        @api_retry(max_attempts=3, min_wait_seconds=0)
        async def test_func():
            return await mock_func()

        assert await test_func() == "ok"
        assert mock_func.await_count == 3

    def test_http_status_errors_are_not_retriable(self):
        assert not issubclass(httpx.HTTPStatusError, API_RETRIABLE_EXCEPTIONS)
