from typing import List
from .models import TaskDefinition

API_BASE = "https://api-pass.levelinfinite.com/api/rewards/proxy/lipass/Points"

DAILY_CHECKIN_ALREADY_DONE_CODE = 1001009
STAGE_CHECKIN_ALREADY_DONE_CODE = 1002007


def default_tasks(daily_system_error_as_done: bool = True) -> List[TaskDefinition]:
    # 1001009 comes back as "system error" once the daily check-in is done;
    # observed behaviour, not documented by the API.
    if daily_system_error_as_done:
        daily = TaskDefinition(
            name="DailyCheckIn",
            url=f"{API_BASE}/DailyCheckIn",
            body={"task_id": "15"},
            already_done_code=DAILY_CHECKIN_ALREADY_DONE_CODE,
            already_done_keywords=("system error",),
        )
    else:
        daily = TaskDefinition(
            name="DailyCheckIn",
            url=f"{API_BASE}/DailyCheckIn",
            body={"task_id": "15"},
            possibly_done_code=DAILY_CHECKIN_ALREADY_DONE_CODE,
        )
    stage = TaskDefinition(
        name="DailyStageCheckIn",
        url=f"{API_BASE}/DailyStageCheckIn",
        body={"task_id": "58"},
        already_done_code=STAGE_CHECKIN_ALREADY_DONE_CODE,
        already_done_keywords=("already sign in today", "stagetaskallcomplete"),
    )
    return [daily, stage]
