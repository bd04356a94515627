"""Tests for the overlay application driven through Textual's pilot."""
import asyncio

import pytest
from conftest import RecordingHandler, dropped_body, make_relay, sse_frame, stream_response
from textual.containers import Vertical
from textual.widgets import Input, Static

from glance.ui.app import OverlayApp
from glance.ui.config import (
    CAPTURE_ERROR_MESSAGE,
    CAPTURE_FAILED_MESSAGE,
    DEFAULT_PLACEHOLDER,
    SCREEN_PLACEHOLDER,
)
from glance.ui.widgets import DebugPanel, OverlayInputBar

SCREEN = "data:image/png;base64,AAAA"
UNKNOWN_MESSAGE = "An unexpected error occurred. Please try again."


async def settle(app, pilot) -> None:
    await app.workers.wait_for_complete()
    await pilot.pause()


class TestOverlayApp:
    """Tests for the overlay interaction flow."""

    @pytest.mark.asyncio
    async def test_overlay_visible_on_start(self, demo_relay):
        app = OverlayApp(demo_relay)
        async with app.run_test() as pilot:
            await pilot.pause()

            assert app.overlay_controller.visible
            assert not app.query_one("#overlay", Vertical).has_class("-hidden")
            assert app.query_one("#overlay-input", Input).placeholder == DEFAULT_PLACEHOLDER

    @pytest.mark.asyncio
    async def test_submit_streams_answer(self, demo_relay):
        """Test that typing a question and pressing enter adds the answer."""
        app = OverlayApp(demo_relay)
        async with app.run_test() as pilot:
            app.query_one("#overlay-input", Input).focus()
            await pilot.press(*"hello", "enter")
            await settle(app, pilot)

            roles = [m.role for m in app.chat_state.messages]
            assert roles == ["user", "assistant"]
            assert app.chat_state.messages[0].content == "hello"
            assert "OPENAI_API_KEY" in app.chat_state.messages[1].content
            assert not app.chat_state.is_processing
            assert app.query_one("#overlay-input", Input).value == ""

    @pytest.mark.asyncio
    async def test_escape_hides_and_clears(self, demo_relay):
        """Test that dismissing the overlay clears the session."""
        app = OverlayApp(demo_relay)
        async with app.run_test() as pilot:
            app.chat_state.add_message("old question", "user")
            await pilot.press("escape")
            await pilot.pause()

            assert not app.overlay_controller.visible
            assert app.chat_state.messages == []
            assert app.query_one("#overlay", Vertical).has_class("-hidden")
            assert app.query_one("#hidden-hint", Static).has_class("visible")

    @pytest.mark.asyncio
    async def test_toggle_shows_again(self, demo_relay):
        app = OverlayApp(demo_relay)
        async with app.run_test() as pilot:
            app.action_hide_overlay()
            await pilot.pause()
            app.action_toggle_overlay()
            await pilot.pause()

            assert app.overlay_controller.visible
            assert not app.query_one("#overlay", Vertical).has_class("-hidden")

    @pytest.mark.asyncio
    async def test_capture_attaches_screenshot(self, demo_relay):
        """Test that a successful capture switches the placeholder."""
        app = OverlayApp(demo_relay, capture=lambda: SCREEN)
        async with app.run_test() as pilot:
            app.action_capture_screen()
            await settle(app, pilot)

            assert app.chat_state.current_screen_data == SCREEN
            assert app.chat_state.is_screen_captured
            assert app.query_one("#overlay-input", Input).placeholder == SCREEN_PLACEHOLDER

    @pytest.mark.asyncio
    async def test_capture_failure_adds_message(self, demo_relay):
        app = OverlayApp(demo_relay, capture=lambda: None)
        async with app.run_test() as pilot:
            app.action_capture_screen()
            await settle(app, pilot)

            assert app.chat_state.current_screen_data is None
            assert app.chat_state.messages[-1].content == CAPTURE_FAILED_MESSAGE

    @pytest.mark.asyncio
    async def test_capture_exception_adds_message(self, demo_relay):
        def explode():
            raise RuntimeError("display gone")

        app = OverlayApp(demo_relay, capture=explode)
        async with app.run_test() as pilot:
            app.action_capture_screen()
            await settle(app, pilot)

            assert app.chat_state.messages[-1].content == CAPTURE_ERROR_MESSAGE
            assert not app.chat_state.is_screen_captured

    @pytest.mark.asyncio
    async def test_clear_chat(self, demo_relay):
        app = OverlayApp(demo_relay)
        async with app.run_test() as pilot:
            app.chat_state.add_message("q", "user")
            app.action_clear_chat()
            await pilot.pause()

            assert app.chat_state.messages == []

    @pytest.mark.asyncio
    async def test_log_level_shows_panel(self, demo_relay):
        app = OverlayApp(demo_relay, log_level="info")
        async with app.run_test() as pilot:
            await pilot.pause()

            assert app.query_one("#debug-panel", DebugPanel).display

    def test_ctrl_c_quits(self):
        assert any(b.key == "ctrl+c" and b.action == "quit" for b in OverlayApp.BINDINGS)


def gated_relay(gate: asyncio.Event):
    """Relay whose answer stalls after "Hel" until ``gate`` is set."""
    async def body():
        yield (sse_frame("Hel") + "\n\n").encode()
        await gate.wait()
        yield (sse_frame("lo") + "\n\n").encode()
        yield b"data: [DONE]\n\n"

    return make_relay(RecordingHandler(lambda request: stream_response(body())))


async def wait_for_stream(app, pilot, text: str) -> None:
    for _ in range(200):
        if app.chat_state.stream_content == text:
            return
        await pilot.pause(0.02)
    raise AssertionError(f"stream never reached {text!r}")


async def ask(app, pilot, question: str) -> None:
    app.query_one("#overlay-input", Input).focus()
    await pilot.press(*question, "enter")


class TestStreamingInApp:
    """Tests for multi-chunk answers in flight."""

    @pytest.mark.asyncio
    async def test_hide_mid_stream_cancels_answer(self):
        """Test that Escape during a stream leaves the state idle and drops late chunks."""
        gate = asyncio.Event()
        app = OverlayApp(gated_relay(gate))
        async with app.run_test() as pilot:
            await ask(app, pilot, "hi")
            await wait_for_stream(app, pilot, "Hel")
            assert app.chat_state.is_processing

            await pilot.press("escape")
            await app.workers.wait_for_complete()
            gate.set()
            await pilot.pause()

            assert not app.chat_state.is_processing
            assert not app.chat_state.is_streaming
            assert app.chat_state.stream_content == ""
            assert app.chat_state.messages == []

    @pytest.mark.asyncio
    async def test_second_submit_rejected_while_streaming(self):
        """Test that a submission during a stream is ignored."""
        gate = asyncio.Event()
        app = OverlayApp(gated_relay(gate))
        async with app.run_test() as pilot:
            await ask(app, pilot, "hi")
            await wait_for_stream(app, pilot, "Hel")

            app.query_one(OverlayInputBar).post_message(OverlayInputBar.Submitted("again"))
            await pilot.pause()
            assert [m.content for m in app.chat_state.messages] == ["hi"]

            gate.set()
            await settle(app, pilot)

            assert [m.content for m in app.chat_state.messages] == ["hi", "Hello"]
            assert not app.chat_state.is_processing

    @pytest.mark.asyncio
    async def test_connection_drop_commits_fallback_only(self):
        """Test that a reset mid-stream shows one error message and no partial text."""
        relay = make_relay(RecordingHandler(lambda request: stream_response(dropped_body("Hel"))))
        app = OverlayApp(relay)
        async with app.run_test() as pilot:
            await ask(app, pilot, "hi")
            await settle(app, pilot)

            assert [m.content for m in app.chat_state.messages] == ["hi", UNKNOWN_MESSAGE]
            assert not app.chat_state.is_processing
            assert not app.chat_state.is_streaming
