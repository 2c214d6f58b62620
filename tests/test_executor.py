"""Tests for the Executor — caching, fault isolation, setup hooks."""

from __future__ import annotations

import asyncio
import threading
import time

import pytest

from sanity.cache import MemoryCache
from sanity.errors import EmptyRegistryError
from sanity.executor import Executor
from sanity.models import Status, Verdict
from sanity.registry import ModuleRegistry


def _run(executor: Executor, **kwargs):
    return asyncio.run(executor.run_cycle(**kwargs))


class TestRunCycle:
    def test_empty_registry_fatal(self, registry: ModuleRegistry) -> None:
        with pytest.raises(EmptyRegistryError):
            _run(Executor(registry))

    def test_hello_world(self, registry: ModuleRegistry) -> None:
        registry.register({"id": "helloWorld", "handler": lambda: "Hello World!"})
        report = _run(Executor(registry))
        assert report.to_dict() == {
            "verdict": "PASS",
            "summary": {"PASS": 1},
            "modules": {
                "helloWorld": {"id": "helloWorld", "status": "PASS", "text": "Hello World!"},
            },
        }

    def test_async_handler(self, registry: ModuleRegistry) -> None:
        async def handler() -> str:
            await asyncio.sleep(0.01)
            return "WARN: slow-ish"

        registry.register({"id": "a", "handler": handler})
        report = _run(Executor(registry))
        assert report.modules["a"].status == Status.WARN
        assert report.verdict == Verdict.PASS

    def test_composite_result(self, registry: ModuleRegistry) -> None:
        registry.register({"id": "m", "handler": lambda: {"a": "PASS: ok", "b": "FAIL: bad"}})
        report = _run(Executor(registry))
        assert report.modules["m/a"].status == Status.PASS
        assert report.modules["m/b"].status == Status.FAIL
        assert report.verdict == Verdict.FAIL

    def test_disabled_skipped(self, registry: ModuleRegistry) -> None:
        calls = []
        registry.register({"id": "off", "enabled": False, "handler": lambda: calls.append(1) or "x"})
        registry.register({"id": "on", "handler": lambda: "x"})
        report = _run(Executor(registry))
        assert set(report.modules) == {"on"}
        assert calls == []

    def test_filter(self, registry: ModuleRegistry) -> None:
        registry.register({"id": "disk", "handler": lambda: "x"})
        registry.register({"id": "net", "handler": lambda: "x"})
        report = _run(Executor(registry), filter=lambda m: m.id == "net")
        assert set(report.modules) == {"net"}


class TestFaultIsolation:
    def test_sync_raise_is_erro(self, registry: ModuleRegistry) -> None:
        def boom() -> str:
            raise RuntimeError("kaboom")

        registry.register({"id": "bad", "handler": boom})
        registry.register({"id": "good", "handler": lambda: "fine"})
        report = _run(Executor(registry))
        assert report.modules["bad"].status == Status.ERRO
        assert report.modules["bad"].text == "kaboom"
        assert report.modules["good"].status == Status.PASS
        assert report.verdict == Verdict.FAIL
        assert report.to_dict()["summary"] == {"ERRO": 1, "PASS": 1}

    def test_async_raise_is_erro(self, registry: ModuleRegistry) -> None:
        async def boom() -> str:
            await asyncio.sleep(0)
            raise ValueError("nope")

        registry.register({"id": "bad", "handler": boom})
        report = _run(Executor(registry))
        assert [r.id for r in report.modules.values()] == ["bad"]
        assert report.modules["bad"].status == Status.ERRO
        assert report.modules["bad"].text == "nope"

    def test_exception_without_message(self, registry: ModuleRegistry) -> None:
        def boom() -> str:
            raise KeyError

        registry.register({"id": "bad", "handler": boom})
        report = _run(Executor(registry))
        assert report.modules["bad"].text == "KeyError"

    def test_malformed_result_is_erro(self, registry: ModuleRegistry) -> None:
        registry.register({"id": "num", "handler": lambda: 42})
        registry.register({"id": "nested", "handler": lambda: {"a": "ok", "b": None}})
        report = _run(Executor(registry))
        assert report.modules["num"].status == Status.ERRO
        assert report.modules["nested"].status == Status.ERRO
        assert "nested/a" not in report.modules

    def test_blocking_handlers_run_concurrently(self, registry: ModuleRegistry) -> None:
        barrier = threading.Barrier(2, timeout=5)

        def wait() -> str:
            barrier.wait()
            return "ok"

        registry.register({"id": "a", "handler": wait})
        registry.register({"id": "b", "handler": wait})
        t0 = time.monotonic()
        report = _run(Executor(registry))
        assert report.summary == {Status.PASS: 2}
        assert time.monotonic() - t0 < 5

    def test_hung_handler_does_not_starve_others(self, registry: ModuleRegistry) -> None:
        release = threading.Event()
        started = []

        def hang() -> str:
            started.append(1)
            release.wait(5)
            return "late"

        registry.register({"id": "hung", "handler": hang})
        registry.register({"id": "fast", "handler": lambda: "quick"})
        executor = Executor(registry, max_workers=2)

        async def scenario():
            for _ in range(6):
                try:
                    await asyncio.wait_for(executor.run_cycle(), 0.05)
                except asyncio.TimeoutError:
                    pass
            return await asyncio.wait_for(
                executor.run_cycle(filter=lambda m: m.id == "fast"), 1,
            )

        try:
            report = asyncio.run(scenario())
        finally:
            release.set()
            executor.close()

        assert report.modules["fast"].status == Status.PASS
        assert started == [1]


class TestCaching:
    def test_second_cycle_served_from_cache(self, registry: ModuleRegistry, cache: MemoryCache) -> None:
        calls = []

        def handler() -> str:
            calls.append(1)
            return "WARN: counted"

        registry.register({"id": "m", "frequency": "1m", "handler": handler})
        executor = Executor(registry, cache)

        first = _run(executor)
        second = _run(executor)

        assert len(calls) == 1
        assert first.modules["m"].cached is None
        stored = asyncio.run(cache.get("m"))
        assert second.modules["m"].cached == stored["last_run"]
        assert second.modules["m"].status == Status.WARN
        assert second.modules["m"].text == "counted"

    def test_no_frequency_always_live(self, registry: ModuleRegistry, cache: MemoryCache) -> None:
        calls = []
        registry.register({"id": "m", "handler": lambda: calls.append(1) or "x"})
        executor = Executor(registry, cache)
        _run(executor)
        _run(executor)
        assert len(calls) == 2
        assert asyncio.run(cache.get("m")) is None

    def test_use_cache_false_forces_live(self, registry: ModuleRegistry, cache: MemoryCache) -> None:
        calls = []
        registry.register({"id": "m", "frequency": "1h", "handler": lambda: calls.append(1) or "x"})
        executor = Executor(registry, cache)
        _run(executor)
        report = _run(executor, use_cache=False)
        assert len(calls) == 2
        assert report.modules["m"].cached is None

    def test_expired_entry_reruns(self, registry: ModuleRegistry) -> None:
        now = [1000.0]
        cache = MemoryCache(clock=lambda: now[0])
        calls = []
        registry.register({"id": "m", "frequency": "10s", "handler": lambda: calls.append(1) or "x"})
        executor = Executor(registry, cache)
        _run(executor)
        now[0] += 11
        _run(executor)
        assert len(calls) == 2

    def test_failures_not_cached(self, registry: ModuleRegistry, cache: MemoryCache) -> None:
        def boom() -> str:
            raise RuntimeError("down")

        registry.register({"id": "m", "frequency": "1m", "handler": boom})
        executor = Executor(registry, cache)
        _run(executor)
        assert asyncio.run(cache.get("m")) is None

    def test_composite_cached(self, registry: ModuleRegistry, cache: MemoryCache) -> None:
        registry.register({"id": "m", "frequency": "1m", "handler": lambda: {"a": "ok", "b": "FAIL: x"}})
        executor = Executor(registry, cache)
        _run(executor)
        report = _run(executor)
        assert report.modules["m/a"].cached is not None
        assert report.modules["m/b"].status == Status.FAIL

    def test_sub_second_frequency(self, registry: ModuleRegistry) -> None:
        now = [1000.0]
        cache = MemoryCache(clock=lambda: now[0])
        calls = []
        registry.register({"id": "m", "frequency": "500ms", "handler": lambda: calls.append(1) or "x"})
        executor = Executor(registry, cache)
        _run(executor)
        now[0] += 0.4
        assert _run(executor).modules["m"].cached is not None
        now[0] += 0.2
        _run(executor)
        assert len(calls) == 2


class TestSetupHooks:
    def test_runs_once(self, registry: ModuleRegistry) -> None:
        calls = []
        registry.register({"id": "m", "before": lambda: calls.append(1), "handler": lambda: "x"})
        executor = Executor(registry)
        _run(executor)
        _run(executor)
        assert calls == [1]
        assert registry.get("m").setup_has_run is True

    def test_async_setup_before_handler(self, registry: ModuleRegistry) -> None:
        state = {}

        async def setup() -> None:
            await asyncio.sleep(0.01)
            state["ready"] = True

        registry.register({"id": "m", "setup": setup, "handler": lambda: "ready" if state.get("ready") else "FAIL: no"})
        report = _run(Executor(registry))
        assert report.modules["m"].status == Status.PASS

    def test_filtered_out_setup_not_run(self, registry: ModuleRegistry) -> None:
        calls = []
        registry.register({"id": "a", "setup": lambda: calls.append("a"), "handler": lambda: "x"})
        registry.register({"id": "b", "handler": lambda: "x"})
        _run(Executor(registry), filter=lambda m: m.id == "b")
        assert calls == []
        assert registry.get("a").setup_has_run is False

    def test_failed_setup_reports_erro_once(self, registry: ModuleRegistry) -> None:
        setup_calls = []
        handler_calls = []

        def setup() -> None:
            setup_calls.append(1)
            raise RuntimeError("no db")

        registry.register({"id": "m", "setup": setup, "handler": lambda: handler_calls.append(1) or "ok"})
        registry.register({"id": "other", "handler": lambda: "fine"})
        executor = Executor(registry)

        first = _run(executor)
        assert first.modules["m"].status == Status.ERRO
        assert first.modules["m"].text == "setup failed: no db"
        assert first.modules["other"].status == Status.PASS
        assert handler_calls == []

        second = _run(executor)
        assert second.modules["m"].status == Status.PASS
        assert setup_calls == [1]
        assert handler_calls == [1]

    def test_overlapping_cycles_share_setup(self, registry: ModuleRegistry) -> None:
        calls = []

        async def setup() -> None:
            calls.append(1)
            await asyncio.sleep(0.05)

        registry.register({"id": "m", "setup": setup, "handler": lambda: "x"})
        executor = Executor(registry)

        async def both():
            return await asyncio.gather(executor.run_cycle(), executor.run_cycle())

        first, second = asyncio.run(both())
        assert calls == [1]
        assert first.modules["m"].status == Status.PASS
        assert second.modules["m"].status == Status.PASS

    def test_overlapping_cycles_share_setup_failure(self, registry: ModuleRegistry) -> None:
        calls = []

        async def setup() -> None:
            calls.append(1)
            await asyncio.sleep(0.05)
            raise RuntimeError("no db")

        registry.register({"id": "m", "setup": setup, "handler": lambda: "x"})
        executor = Executor(registry)

        async def both():
            return await asyncio.gather(executor.run_cycle(), executor.run_cycle())

        reports = asyncio.run(both())
        for report in reports:
            assert report.modules["m"].status == Status.ERRO
            assert report.modules["m"].text == "setup failed: no db"

        third = _run(executor)
        assert third.modules["m"].status == Status.PASS
        assert calls == [1]
