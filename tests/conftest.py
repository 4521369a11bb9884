from pathlib import Path
import sys

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from lipcheckin.models import TaskDefinition


@pytest.fixture
def daily_task():
    return TaskDefinition(
        name="DailyCheckIn",
        url="https://rewards.example.com/DailyCheckIn",
        body={"task_id": "15"},
        already_done_code=1001009,
        already_done_keywords=("system error",),
    )


@pytest.fixture
def stage_task():
    return TaskDefinition(
        name="DailyStageCheckIn",
        url="https://rewards.example.com/DailyStageCheckIn",
        body={"task_id": "58"},
        already_done_code=1002007,
        already_done_keywords=("already sign in today", "stagetaskallcomplete"),
    )
