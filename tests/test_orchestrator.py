from datetime import datetime
from zoneinfo import ZoneInfo

import httpx
import pytest

from lipcheckin.config import Settings
from lipcheckin.services.executor import TaskExecutor
from lipcheckin.services.orchestrator import CheckinOrchestrator, format_timestamp


class RecordingNotifier:
    def __init__(self):
        self.sent = []

    def notify(self, title, body):
        self.sent.append((title, body))
        return True


def fixed_clock():
    return datetime(2025, 5, 20, 8, 3, 9, tzinfo=ZoneInfo("Asia/Shanghai"))


def make_orchestrator(credentials, tasks, handler, notifier):
    executor = TaskExecutor(client=httpx.Client(transport=httpx.MockTransport(handler)))
    settings = Settings(credentials=credentials)
    return CheckinOrchestrator(settings, tasks, executor=executor, notifier=notifier, clock=fixed_clock)


def test_no_accounts_sends_single_notice(daily_task):
    calls = []
    notifier = RecordingNotifier()

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json={"code": 0, "msg": "ok"})

    report = make_orchestrator([], [daily_task], handler, notifier).run_all("manual")

    assert calls == []
    assert len(notifier.sent) == 1
    assert "No accounts configured" in notifier.sent[0][1]
    assert [o.status for o in report.outcomes] == ["config_error"]
    assert report.aggregate == "config_error"


def test_two_accounts_success_and_already_done(daily_task):
    notifier = RecordingNotifier()

    def handler(request):
        if request.headers["cookie"] == "first":
            return httpx.Response(200, json={"code": 0, "msg": "ok"})
        return httpx.Response(200, json={"code": 1001009, "msg": "system error"})

    report = make_orchestrator(["first", "second"], [daily_task], handler, notifier).run_all("scheduled")

    assert [o.status for o in report.outcomes] == ["success", "already_completed"]
    assert report.accounts_processed == 2
    assert report.aggregate == "ok"
    assert report.summary.lines == [
        "[Account 1] DailyCheckIn: ✅ API message: ok",
        "[Account 2] DailyCheckIn: ℹ️ Already completed today (API code: 1001009)",
    ]
    assert len(notifier.sent) == 1
    title, body = notifier.sent[0]
    assert title == "LIP check-in report - scheduled"
    assert body.endswith("⏰ Time: 2025/5/20 08:03:09")


def test_accounts_and_tasks_run_in_order(daily_task, stage_task):
    seen = []

    def handler(request):
        seen.append((request.headers["cookie"], request.url.path.rsplit("/", 1)[-1]))
        return httpx.Response(200, json={"code": 0, "msg": "ok"})

    make_orchestrator(["a", "b"], [daily_task, stage_task], handler, RecordingNotifier()).run_all("manual")

    assert seen == [
        ("a", "DailyCheckIn"), ("a", "DailyStageCheckIn"),
        ("b", "DailyCheckIn"), ("b", "DailyStageCheckIn"),
    ]


class ExplodingExecutor:
    def __init__(self):
        self.calls = 0

    def execute(self, credential, task, label=""):
        self.calls += 1
        if self.calls == 1:
            raise RuntimeError("boom")
        from lipcheckin.services.classifier import classify
        return classify(task, 200, '{"code": 0, "msg": "ok"}')


def test_task_crash_does_not_abort_run(daily_task, stage_task):
    notifier = RecordingNotifier()
    executor = ExplodingExecutor()
    orchestrator = CheckinOrchestrator(Settings(credentials=["a"]), [daily_task, stage_task],
                                       executor=executor, notifier=notifier, clock=fixed_clock)

    report = orchestrator.run_all("manual")

    assert executor.calls == 2
    assert [o.status for o in report.outcomes] == ["error", "success"]
    assert report.summary.lines[0] == "[Account 1] DailyCheckIn: 🆘 Execution error: boom"
    assert report.aggregate == "partial"
    assert len(notifier.sent) == 1


def test_all_failed_aggregate(daily_task):
    def handler(request):
        return httpx.Response(403, json={"code": 1001, "msg": "not login"})

    report = make_orchestrator(["a", "b"], [daily_task], handler, RecordingNotifier()).run_all("manual")

    assert report.aggregate == "failed"
    assert all("cookie has expired" in o.message for o in report.outcomes)
    assert report.summary.lines[0].startswith("[Account 1] DailyCheckIn: ❌")


@pytest.mark.parametrize(
    "moment, expected",
    [
        (datetime(2025, 1, 2, 3, 4, 5), "2025/1/2 03:04:05"),
        (datetime(2024, 12, 31, 23, 59, 0), "2024/12/31 23:59:00"),
    ],
)
def test_format_timestamp(moment, expected):
    assert format_timestamp(moment) == expected
