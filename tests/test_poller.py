"""Tests for the completion poller."""

import asyncio

import pytest

from freepik_seedream.errors import GenerationFailed, GenerationTimeout
from freepik_seedream.models import GenerationTask
from freepik_seedream.poller import wait_for_completion

pytestmark = pytest.mark.anyio


class FakeVendor:
    """Scripted status checks; the last status repeats once exhausted."""

    def __init__(self, *statuses: str) -> None:
        self.statuses = list(statuses)
        self.checks = 0

    async def check(self, task_id: str) -> GenerationTask:
        status = self.statuses[min(self.checks, len(self.statuses) - 1)]
        self.checks += 1
        generated = ["https://img.example/done.png"] if status == "COMPLETED" else []
        return GenerationTask(task_id=task_id, status=status, generated=generated)


class RecordingSleep:
    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


class TestWaitForCompletion:
    """Test wait_for_completion."""

    @pytest.mark.parametrize("k", [1, 2, 5])
    async def test_completes_after_exactly_k_checks(self, k: int) -> None:
        """A task completing on check k costs k checks and k sleeps."""
        vendor = FakeVendor(*(["IN_PROGRESS"] * (k - 1) + ["COMPLETED"]))
        sleep = RecordingSleep()

        task = await wait_for_completion(
            vendor.check, "t1", max_attempts=10, interval=1.5, sleep=sleep
        )

        assert task.is_completed
        assert task.first_url == "https://img.example/done.png"
        assert vendor.checks == k
        assert sleep.calls == [1.5] * k

    async def test_sleeps_before_first_check(self) -> None:
        events: list[str] = []

        async def check(task_id: str) -> GenerationTask:
            events.append("check")
            return GenerationTask(task_id=task_id, status="COMPLETED")

        async def sleep(seconds: float) -> None:
            events.append("sleep")

        await wait_for_completion(check, "t1", max_attempts=3, interval=2, sleep=sleep)
        assert events == ["sleep", "check"]

    async def test_timeout_after_max_attempts(self) -> None:
        vendor = FakeVendor("CREATED", "IN_PROGRESS")
        sleep = RecordingSleep()

        with pytest.raises(GenerationTimeout) as exc_info:
            await wait_for_completion(
                vendor.check, "t1", max_attempts=4, interval=0.1, sleep=sleep
            )

        assert vendor.checks == 4
        assert len(sleep.calls) == 4
        assert exc_info.value.attempts == 4
        assert str(exc_info.value) == "Timeout waiting for task t1 after 4 attempts"

    async def test_failed_task(self) -> None:
        vendor = FakeVendor("IN_PROGRESS", "FAILED")

        with pytest.raises(GenerationFailed) as exc_info:
            await wait_for_completion(
                vendor.check, "t9", max_attempts=10, interval=0, sleep=RecordingSleep()
            )

        assert vendor.checks == 2
        assert exc_info.value.code == "generation_failed"
        assert str(exc_info.value) == "Generation failed for task t9"

    async def test_unknown_status_keeps_polling(self) -> None:
        vendor = FakeVendor("QUEUED", "COMPLETED")
        task = await wait_for_completion(
            vendor.check, "t1", max_attempts=3, interval=0, sleep=RecordingSleep()
        )
        assert task.is_completed
        assert vendor.checks == 2

    @pytest.mark.parametrize(
        ("max_attempts", "interval"),
        [(0, 1.0), (-1, 1.0), (3, -0.5)],
    )
    async def test_invalid_parameters(self, max_attempts: int, interval: float) -> None:
        vendor = FakeVendor("COMPLETED")
        with pytest.raises(ValueError):
            await wait_for_completion(
                vendor.check,
                "t1",
                max_attempts=max_attempts,
                interval=interval,
                sleep=RecordingSleep(),
            )
        assert vendor.checks == 0

    async def test_check_errors_propagate(self) -> None:
        async def check(task_id: str) -> GenerationTask:
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            await wait_for_completion(
                check, "t1", max_attempts=3, interval=0, sleep=RecordingSleep()
            )

    async def test_concurrent_polls_do_not_serialize(self) -> None:
        """Two polls sharing one loop overlap their waits."""
        loop = asyncio.get_running_loop()
        vendors = [FakeVendor("IN_PROGRESS", "COMPLETED") for _ in range(2)]

        started = loop.time()
        results = await asyncio.gather(
            *(
                wait_for_completion(v.check, f"t{i}", max_attempts=5, interval=0.2)
                for i, v in enumerate(vendors)
            )
        )
        elapsed = loop.time() - started

        assert all(t.is_completed for t in results)
        # Two sleeps each; serialized polls would need about 0.8 s
        assert elapsed < 0.7
