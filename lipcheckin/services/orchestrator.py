import logging
from datetime import datetime
from typing import Callable, List, Optional, Sequence
from zoneinfo import ZoneInfo
from ..config import Settings
from ..models import CRASH_ICON, CheckinOutcome, RunReport, RunSummary, TaskDefinition, TaskResult, Verdict
from .executor import TaskExecutor
from .notifier import TelegramNotifier

logger = logging.getLogger(__name__)

NO_ACCOUNTS_MESSAGE = "No accounts configured: no {prefix}N variables found."

STATUS_BY_VERDICT = {
    Verdict.SUCCESS: "success",
    Verdict.ALREADY_DONE: "already_completed",
    Verdict.POSSIBLY_DONE: "possibly_completed",
    Verdict.FAILURE: "failed",
}


def format_timestamp(moment: datetime) -> str:
    return f"{moment.year}/{moment.month}/{moment.day} {moment:%H:%M:%S}"


class CheckinOrchestrator:
    """Runs every configured task for every account and sends one summary."""

    def __init__(self, settings: Settings, tasks: Sequence[TaskDefinition],
                 executor: Optional[TaskExecutor] = None,
                 notifier: Optional[TelegramNotifier] = None,
                 clock: Optional[Callable[[], datetime]] = None):
        self.settings = settings
        self.tasks = list(tasks)
        self.executor = executor or TaskExecutor(timeout=settings.request_timeout_seconds)
        self.notifier = notifier or TelegramNotifier(
            settings.telegram_bot_token, settings.telegram_chat_id,
            timeout=settings.request_timeout_seconds,
        )
        self.clock = clock or (lambda: datetime.now(ZoneInfo(settings.timezone)))

    def run_all(self, trigger: str) -> RunReport:
        credentials = self.settings.credentials
        summary = RunSummary(title=f"LIP check-in report - {trigger}")

        if not credentials:
            message = NO_ACCOUNTS_MESSAGE.format(prefix=self.settings.credential_prefix)
            logger.warning(message)
            summary.lines.append(f"System notice: {message}")
            self.notifier.notify(summary.title, summary.render())
            return RunReport(trigger=trigger, summary=summary,
                             outcomes=[CheckinOutcome(status="config_error", message=message)])

        logger.info("Found %d account(s). Starting %s run...", len(credentials), trigger)
        outcomes: List[CheckinOutcome] = []
        for index, credential in enumerate(credentials, start=1):
            label = f"Account {index}"
            for task in self.tasks:
                outcome, icon = self._run_task(index, label, credential, task)
                outcomes.append(outcome)
                summary.lines.append(f"[{label}] {task.name}: {icon} {outcome.message}")

        summary.timestamp = format_timestamp(self.clock())
        self.notifier.notify(summary.title, summary.render())
        return RunReport(trigger=trigger, summary=summary, outcomes=outcomes,
                         accounts_processed=len(credentials))

    def _run_task(self, index: int, label: str, credential: str, task: TaskDefinition):
        logger.info("[%s] Starting task: %s", label, task.name)
        try:
            result: TaskResult = self.executor.execute(credential, task, label)
        except Exception as e:
            logger.exception("[%s] Error during task %s", label, task.name)
            outcome = CheckinOutcome(account=index, task=task.name, status="error",
                                     message=f"Execution error: {e}")
            return outcome, CRASH_ICON

        outcome = CheckinOutcome(account=index, task=task.name, status=STATUS_BY_VERDICT[result.verdict],
                                 message=result.message, http_status=result.http_status)
        return outcome, result.icon
