"""Tests for oairouter.events.EventEmitter."""

from __future__ import annotations

import asyncio
import logging

import pytest

from oairouter.events import EventEmitter


class TestEventEmitter:
    def test_emit_without_listeners(self) -> None:
        emitter = EventEmitter()
        assert emitter.emit("ready") is False

    def test_listeners_run_in_registration_order(self) -> None:
        emitter = EventEmitter()
        calls: list[str] = []
        emitter.on("ready", lambda: calls.append("a"))
        emitter.on("ready", lambda: calls.append("b"))

        assert emitter.emit("ready") is True
        assert calls == ["a", "b"]

    def test_arguments_are_forwarded(self) -> None:
        emitter = EventEmitter()
        errors: list[Exception] = []
        emitter.on("error", errors.append)
        failure = ValueError("bad")

        emitter.emit("error", failure)
        assert errors == [failure]

    def test_once_fires_a_single_time(self) -> None:
        emitter = EventEmitter()
        calls: list[int] = []
        emitter.once("ready", lambda: calls.append(1))

        emitter.emit("ready")
        emitter.emit("ready")

        assert calls == [1]
        assert emitter.listener_count("ready") == 0

    def test_off_removes_listener(self) -> None:
        emitter = EventEmitter()
        calls: list[int] = []

        def listener() -> None:
            calls.append(1)

        emitter.on("ready", listener)
        emitter.off("ready", listener)
        emitter.emit("ready")

        assert calls == []
        assert emitter.listener_count("ready") == 0

    def test_on_returns_listener(self) -> None:
        emitter = EventEmitter()

        def listener() -> None:
            pass

        assert emitter.on("ready", listener) is listener
        assert emitter.listener_count("ready") == 1

    def test_raising_listener_is_logged_and_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        emitter = EventEmitter()
        calls: list[str] = []

        def broken() -> None:
            raise RuntimeError("listener failed")

        emitter.on("ready", broken)
        emitter.on("ready", lambda: calls.append("after"))

        with caplog.at_level(logging.ERROR, logger="oairouter.events"):
            emitter.emit("ready")

        assert calls == ["after"]
        assert "Listener for 'ready' raised" in caplog.text

    @pytest.mark.asyncio
    async def test_coroutine_listener_is_scheduled(self) -> None:
        emitter = EventEmitter()
        done = asyncio.Event()

        async def listener() -> None:
            done.set()

        emitter.on("ready", listener)
        emitter.emit("ready")

        await asyncio.wait_for(done.wait(), timeout=1)

    @pytest.mark.asyncio
    async def test_failing_coroutine_listener_is_logged(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        emitter = EventEmitter()

        async def listener() -> None:
            raise RuntimeError("async failure")

        emitter.on("error", listener)
        with caplog.at_level(logging.ERROR, logger="oairouter.events"):
            emitter.emit("error")
            for _ in range(3):
                await asyncio.sleep(0)

        assert "Async listener raised" in caplog.text
