import logging
from celery import Celery
from celery.schedules import crontab
from lipcheckin.config import get_settings
from lipcheckin.logging_config import setup_logging

logger = logging.getLogger("lipcheckin.worker")

settings = get_settings()
setup_logging(settings.log_level)


def parse_cron(expr: str) -> crontab:
    """Build a crontab from a five-field expression (minute hour day month weekday)."""
    fields = expr.split()
    if len(fields) != 5:
        raise ValueError(f"Cron expression must have 5 fields: {expr!r}")
    minute, hour, day_of_month, month_of_year, day_of_week = fields
    return crontab(minute=minute, hour=hour, day_of_month=day_of_month,
                   month_of_year=month_of_year, day_of_week=day_of_week)


celery_app = Celery(
    "lipcheckin",
    broker=settings.redis_url,
    backend=settings.redis_url,
)
celery_app.conf.timezone = settings.timezone
celery_app.conf.beat_schedule = {
    "scheduled-checkin": {
        "task": "scheduled_checkin",
        "schedule": parse_cron(settings.checkin_cron),
    },
}


@celery_app.task(name="scheduled_checkin")
def scheduled_checkin() -> None:
    from lipcheckin.catalog import default_tasks
    from lipcheckin.services.orchestrator import CheckinOrchestrator
    logger.info("Scheduled check-in for all accounts and tasks started...")
    orchestrator = CheckinOrchestrator(settings, default_tasks(settings.daily_system_error_as_done))
    orchestrator.run_all("scheduled")
