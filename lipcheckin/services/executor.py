import logging
import httpx
from ..models import TaskDefinition, TaskResult
from .classifier import classify, transport_failure

logger = logging.getLogger(__name__)

# The rewards API rejects requests that do not look like they come from the web client.
CLIENT_HEADERS = {
    "Accept": "application/json, text/plain, */*",
    "Accept-Language": "zh-HK,zh;q=0.9",
    "Content-Type": "application/json",
    "Origin": "https://pass.levelinfinite.com",
    "Referer": "https://pass.levelinfinite.com/",
    "Sec-Ch-Ua": '"Chromium";v="136", "Google Chrome";v="136", "Not.A/Brand";v="99"',
    "Sec-Ch-Ua-Mobile": "?0",
    "Sec-Ch-Ua-Platform": '"Windows"',
    "Sec-Fetch-Dest": "empty",
    "Sec-Fetch-Mode": "cors",
    "Sec-Fetch-Site": "same-site",
    "User-Agent": ("Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
                   "(KHTML, like Gecko) Chrome/136.0.0.0 Safari/537.36"),
    "X-Channel-Type": "1",
    "X-Common-Params": '{"game_id":"4","area_id":"global","source":"pc_web","lip_region":"392","env":"sg"}',
    "X-Language": "zh",
}


class TaskExecutor:
    def __init__(self, timeout: float = 30.0, client: httpx.Client | None = None):
        self.timeout = timeout
        self.client = client

    def execute(self, credential: str, task: TaskDefinition, label: str = "") -> TaskResult:
        headers = {**CLIENT_HEADERS, "Cookie": credential}
        logger.info("[%s] Task '%s': %s %s", label, task.name, task.method, task.url)
        try:
            response = self._send(task, headers)
        except httpx.HTTPError as exc:
            logger.error("[%s] Task '%s': transport error: %s", label, task.name, exc)
            return transport_failure(exc)
        except Exception as exc:
            # e.g. UnicodeEncodeError for a cookie that is not valid header text
            logger.exception("[%s] Task '%s': client error while sending request", label, task.name)
            return transport_failure(exc)

        text = response.text
        logger.info("[%s] Task '%s': HTTP %s", label, task.name, response.status_code)
        logger.debug("[%s] Task '%s': body %s", label, task.name, text[:300])
        return classify(task, response.status_code, text)

    def _send(self, task: TaskDefinition, headers: dict) -> httpx.Response:
        if self.client is not None:
            return self.client.request(task.method, task.url, headers=headers, json=task.body)
        with httpx.Client(timeout=self.timeout) as client:
            return client.request(task.method, task.url, headers=headers, json=task.body)
