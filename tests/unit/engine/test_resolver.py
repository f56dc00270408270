"""
Tests for the element resolver state machine.
"""

import logging

import pytest

from element_resolver.config import ResolverSettings
from element_resolver.engine.diagnostics import AttemptOutcome
from element_resolver.engine.locator import MARKER_ATTRIBUTE
from element_resolver.engine.options import ResolutionOptions
from element_resolver.engine.resolver import ElementResolver
from element_resolver.engine.strategies import Strategy
from element_resolver.exceptions import (
    ElementNotFoundError,
    NoPageAttachedError,
    ResolutionFailedError,
)


class FakeClock:
    def __init__(self):
        self.now = 0.0
    
    def __call__(self) -> float:
        return self.now


class TestResolveScenarios:
    """End-to-end resolve calls against the fake page."""
    
    @pytest.mark.asyncio
    async def test_falls_back_to_text_after_id_is_exhausted(self, resolver, make_page, make_node, sleeps):
        button = make_node(tag="button", text="Submit")
        page = make_page([make_node(tag="form"), button])
        
        resolution = await resolver.resolve_detailed(page, "Submit", strategies=["id", "text"])
        
        assert resolution.element.node is button
        assert resolution.strategy is Strategy.TEXT
        assert resolution.attempt_index == 0
        assert page.queried().count('[id="Submit"]') == 3
        assert sleeps == [pytest.approx(0.1), pytest.approx(0.15)]
        assert not page.has_marker()
    
    @pytest.mark.asyncio
    async def test_failure_after_exactly_max_retries(self, resolver, make_page, sleeps):
        page = make_page()
        
        with pytest.raises(ResolutionFailedError) as exc_info:
            await resolver.resolve(page, "#nonexistent", strategies=["attribute-contains"])
        
        error = exc_info.value
        assert len(error.attempts) == 3
        assert [a.attempt_index for a in error.attempts] == [0, 1, 2]
        assert all(a.outcome is AttemptOutcome.NOT_FOUND for a in error.attempts)
        assert error.snapshot == b"\x89PNG-fake"
        assert error.trace.strategies_tried == ["css"]
        assert sleeps == [pytest.approx(0.1), pytest.approx(0.15)]
    
    @pytest.mark.asyncio
    async def test_hidden_element_accepted_when_visibility_not_required(self, resolver, make_page, make_node, sleeps):
        hidden = make_node(attrs={"id": "menu"}, style={"display": "none"})
        page = make_page([hidden])
        
        resolution = await resolver.resolve_detailed(page, "#menu", strategies=["css"], visible=False)
        
        assert resolution.element.node is hidden
        assert resolution.attempt_index == 0
        assert sleeps == []
        # no visibility probe was issued
        assert not [entry for entry in page.log if entry[0] == "element.evaluate"]
    
    @pytest.mark.asyncio
    async def test_no_page(self, resolver):
        with pytest.raises(NoPageAttachedError, match="No page open"):
            await resolver.resolve(None, "Submit")
    
    @pytest.mark.asyncio
    async def test_closed_page(self, resolver, make_page):
        page = make_page()
        page.closed = True
        
        with pytest.raises(NoPageAttachedError):
            await resolver.resolve(page, "Submit")
        
        assert page.log == []
    
    @pytest.mark.asyncio
    async def test_text_only_in_script_fails(self, resolver, make_page, make_node):
        body = make_node("body", children=[make_node("script", text='var s = "Submit";'), make_node("p", text="x")])
        page = make_page([body])
        
        with pytest.raises(ResolutionFailedError) as exc_info:
            await resolver.resolve(page, "Submit", strategies=["text"])
        
        assert all(a.outcome is AttemptOutcome.NOT_FOUND for a in exc_info.value.attempts)
        assert MARKER_ATTRIBUTE not in body.attrs


class TestStrategyOrdering:
    """Strategies run strictly in caller order."""
    
    @pytest.mark.asyncio
    async def test_stops_after_first_success(self, resolver, make_page, make_node):
        page = make_page([make_node(attrs={"id": "go", "name": "go"})])
        
        resolution = await resolver.resolve_detailed(page, "go", strategies=["id", "name"])
        
        assert resolution.strategy is Strategy.ID
        assert '[name="go"]' not in page.queried()
    
    @pytest.mark.asyncio
    async def test_strategies_are_not_interleaved(self, resolver, make_page, make_node):
        page = make_page([make_node(attrs={"class": "go"})])
        
        await resolver.resolve(page, "go", strategies=["id", "name", "class"])
        
        assert page.queried() == [
            '[id="go"]', '[id="go"]', '[id="go"]',
            '[name="go"]', '[name="go"]', '[name="go"]',
            '[class~="go"]',
        ]
    
    @pytest.mark.asyncio
    async def test_hidden_match_exhausts_before_next_strategy(self, resolver, make_page, make_node):
        visible = make_node(attrs={"name": "go"})
        page = make_page([make_node(attrs={"id": "go"}, style={"visibility": "hidden"}), visible])
        
        resolution = await resolver.resolve_detailed(page, "go", strategies=["id", "name"])
        
        assert resolution.element.node is visible
        assert resolution.strategy is Strategy.NAME
    
    @pytest.mark.asyncio
    async def test_trace_records_not_visible(self, resolver, make_page, make_node):
        page = make_page([make_node(attrs={"id": "go"}, style={"opacity": "0"})])
        
        with pytest.raises(ResolutionFailedError) as exc_info:
            await resolver.resolve(page, "go", strategies=["id"])
        
        assert [a.outcome for a in exc_info.value.attempts] == [AttemptOutcome.NOT_VISIBLE] * 3
    
    @pytest.mark.asyncio
    async def test_default_strategies_cover_every_technique(self, resolver, make_page, make_node, sleeps):
        field = make_node(tag="input", attrs={"name": "email"})
        page = make_page([field])
        
        resolution = await resolver.resolve_detailed(page, "email")
        
        assert resolution.strategy is Strategy.NAME
        # css, xpath, text, aria and id were each exhausted first
        assert len(sleeps) == 10
    
    @pytest.mark.asyncio
    async def test_default_strategies_from_settings(self, fake_sleep, make_page, make_node):
        settings = ResolverSettings(default_strategies=["class", "id"])
        resolver = ElementResolver(settings, sleep=fake_sleep)
        page = make_page([make_node(attrs={"id": "go"})])
        
        await resolver.resolve(page, "go")
        
        assert page.queried()[0] == '[class~="go"]'
    
    @pytest.mark.asyncio
    async def test_duplicate_strategies_run_once(self, resolver, make_page):
        with pytest.raises(ResolutionFailedError) as exc_info:
            await resolver.resolve(make_page(), "go", strategies=["id", "attribute-exact"])
        assert len(exc_info.value.attempts) == 3
    
    @pytest.mark.asyncio
    async def test_unknown_strategy(self, resolver, make_page):
        with pytest.raises(ValueError, match="Unknown strategy"):
            await resolver.resolve(make_page(), "go", strategies=["telepathy"])


class TestRetryBehavior:
    """Retries within one strategy."""
    
    @pytest.mark.asyncio
    async def test_element_appearing_late_is_found(self, resolver, make_page, make_node, sleeps):
        late = make_node(attrs={"id": "late"}, present_after=1)
        page = make_page([late])
        
        resolution = await resolver.resolve_detailed(page, "late", strategies=["id"])
        
        assert resolution.element.node is late
        assert resolution.attempt_index == 1
        assert sleeps == [pytest.approx(0.1)]
    
    @pytest.mark.asyncio
    async def test_driver_errors_do_not_abort_the_call(self, resolver, make_page, make_node):
        page = make_page([make_node(attrs={"name": "go"})])
        page.errors['[id="go"]'] = RuntimeError("Protocol error")
        
        resolution = await resolver.resolve_detailed(page, "go", strategies=["id", "name"])
        
        assert resolution.strategy is Strategy.NAME
    
    @pytest.mark.asyncio
    async def test_error_outcome_in_trace(self, resolver, make_page):
        page = make_page()
        page.errors["div["] = RuntimeError("SyntaxError: 'div[' is not a valid selector")
        
        with pytest.raises(ResolutionFailedError) as exc_info:
            await resolver.resolve(page, "div[", strategies=["css"])
        
        attempt = exc_info.value.attempts[0]
        assert attempt.outcome is AttemptOutcome.ERROR
        assert "RuntimeError" in attempt.message
    
    @pytest.mark.asyncio
    async def test_per_call_max_retries(self, resolver, make_page, sleeps):
        with pytest.raises(ResolutionFailedError) as exc_info:
            await resolver.resolve(make_page(), "go", strategies=["id"], max_retries=1)
        assert len(exc_info.value.attempts) == 1
        assert sleeps == []
    
    @pytest.mark.asyncio
    async def test_options_object(self, resolver, make_page, sleeps):
        options = ResolutionOptions(max_retries=2, initial_delay_ms=10)
        with pytest.raises(ResolutionFailedError):
            await resolver.resolve(make_page(), "go", strategies=["id"], options=options)
        assert sleeps == [pytest.approx(0.01)]
    
    @pytest.mark.asyncio
    async def test_text_scan_marker_removed_after_failure(self, resolver, make_page, make_node):
        page = make_page([make_node(text="Submit")])
        page.fail_marker_requery = True
        
        with pytest.raises(ResolutionFailedError):
            await resolver.resolve(page, "Submit", strategies=["text"])
        
        assert not page.has_marker()


class TestTimeout:
    """Advisory and enforced timeouts."""
    
    @pytest.mark.asyncio
    async def test_timeout_is_advisory_by_default(self, resolver, make_page, sleeps):
        with pytest.raises(ResolutionFailedError) as exc_info:
            await resolver.resolve(make_page(), "go", strategies=["id", "name"], timeout_ms=1)
        
        assert len(exc_info.value.attempts) == 6
        assert exc_info.value.trace.timed_out is False
    
    @pytest.mark.asyncio
    async def test_enforced_timeout_stops_the_call(self, resolver_settings, make_page):
        clock = FakeClock()
        
        async def sleep(seconds):
            clock.now += seconds + 0.001
        
        resolver = ElementResolver(resolver_settings, sleep=sleep, clock=clock)
        
        with pytest.raises(ResolutionFailedError) as exc_info:
            await resolver.resolve(
                make_page(), "go", strategies=["id", "name"],
                timeout_ms=200, enforce_timeout=True,
            )
        
        trace = exc_info.value.trace
        assert trace.timed_out is True
        assert trace.strategies_tried == ["id"]
        assert len(trace.attempts) == 2
        assert "deadline reached" in str(exc_info.value)


class TestFailureReporting:
    """The structured failure."""
    
    @pytest.mark.asyncio
    async def test_is_an_element_not_found_error(self, resolver, make_page):
        with pytest.raises(ElementNotFoundError) as exc_info:
            await resolver.resolve(make_page(), "go", strategies=["id"])
        assert exc_info.value.selector == "go"
        assert exc_info.value.details["strategies"] == ["id"]
    
    @pytest.mark.asyncio
    async def test_message_joins_attempts(self, resolver, make_page):
        with pytest.raises(ResolutionFailedError) as exc_info:
            await resolver.resolve(make_page(), "go", strategies=["id"], max_retries=2)
        
        message = str(exc_info.value)
        assert message.startswith("Failed to find element with selector: go. Debug info: ")
        assert "id attempt 1 (not_found)" in message
        assert " | id attempt 2 (not_found)" in message
    
    @pytest.mark.asyncio
    async def test_logs_failure_with_html_preview(self, resolver, make_page, make_node, caplog):
        page = make_page([make_node(tag="p", text="Hi")])
        
        with caplog.at_level(logging.ERROR, logger="element_resolver"):
            with pytest.raises(ResolutionFailedError):
                await resolver.resolve(page, "go", strategies=["id"])
        
        assert "Failed to find element with selector: go" in caplog.text
        assert "<p>Hi</p>" in caplog.text
    
    @pytest.mark.asyncio
    async def test_snapshot_failure_still_raises_resolution_failure(self, resolver, make_page):
        page = make_page()
        page.screenshot_error = RuntimeError("Target closed")
        
        with pytest.raises(ResolutionFailedError) as exc_info:
            await resolver.resolve(page, "go", strategies=["id"])
        
        assert exc_info.value.snapshot is None
    
    @pytest.mark.asyncio
    async def test_snapshot_saved_when_directory_configured(self, fake_sleep, make_page, tmp_path):
        settings = ResolverSettings(snapshot_dir=str(tmp_path))
        resolver = ElementResolver(settings, sleep=fake_sleep)
        
        with pytest.raises(ResolutionFailedError) as exc_info:
            await resolver.resolve(make_page(), "go", strategies=["id"])
        
        assert exc_info.value.trace.snapshot_path.exists()
    
    @pytest.mark.asyncio
    async def test_calls_do_not_share_traces(self, resolver, make_page):
        with pytest.raises(ResolutionFailedError) as first:
            await resolver.resolve(make_page(), "a", strategies=["id"])
        with pytest.raises(ResolutionFailedError) as second:
            await resolver.resolve(make_page(), "b", strategies=["id"])
        
        assert len(first.value.attempts) == 3
        assert len(second.value.attempts) == 3
        assert all(a.query == '[id="b"]' for a in second.value.attempts)
