"""
Tests for retry utilities.
"""

import pytest
from unittest.mock import AsyncMock, patch

from element_resolver.exceptions import NavigationError
from element_resolver.utils.retry import RetryConfig, retry, retry_async


@pytest.fixture
def no_sleep():
    with patch("element_resolver.utils.retry.asyncio.sleep", new=AsyncMock()) as sleep:
        yield sleep


class TestRetryAsync:
    """Test retry_async."""
    
    @pytest.mark.asyncio
    async def test_returns_first_success(self, no_sleep):
        func = AsyncMock(side_effect=[NavigationError("timeout"), "ok"])
        
        result = await retry_async(func, RetryConfig(max_attempts=3), "https://example.com")
        
        assert result == "ok"
        assert func.call_count == 2
        no_sleep.assert_called_once_with(0.1)
    
    @pytest.mark.asyncio
    async def test_raises_last_error(self, no_sleep):
        func = AsyncMock(side_effect=NavigationError("timeout"))
        
        with pytest.raises(NavigationError):
            await retry_async(func, RetryConfig(max_attempts=2))
        
        assert func.call_count == 2
        assert no_sleep.call_count == 1
    
    @pytest.mark.asyncio
    async def test_other_errors_are_not_retried(self, no_sleep):
        func = AsyncMock(side_effect=KeyError("boom"))
        
        with pytest.raises(KeyError):
            await retry_async(func, RetryConfig(max_attempts=3, retry_on=(NavigationError,)))
        
        assert func.call_count == 1


class TestRetryDecorator:
    """Test the retry decorator."""
    
    @pytest.mark.asyncio
    async def test_decorator(self, no_sleep):
        calls = []
        
        @retry(max_attempts=3, initial_delay_ms=10, retry_on=(NavigationError,))
        async def open_page(url):
            calls.append(url)
            if len(calls) < 3:
                raise NavigationError("refused", url=url)
            return url
        
        assert await open_page("https://example.com") == "https://example.com"
        assert len(calls) == 3
        assert [c.args[0] for c in no_sleep.call_args_list] == [pytest.approx(0.01), pytest.approx(0.015)]
