from typing import Any, Optional
import orjson
from ..models import ClassificationRule, RuleKind, TaskDefinition, TaskResult, Verdict

EXCERPT_CHARS = 100
AUTH_HINT = " (usually means the cookie has expired or lacks permission; update this account's cookie)."


def classify(task: TaskDefinition, http_status: int, text: str) -> TaskResult:
    """Turn one upstream response into a TaskResult.

    Rules from ``task.rules()`` are tried in order against the JSON ``code``/``msg``
    fields; a body that is not a JSON object is always a failure.
    """
    ok = 200 <= http_status < 300
    data = _parse_json(text)

    if data is None:
        if ok:
            message = (f"Request succeeded (HTTP {http_status}) but the response body is not valid JSON. "
                       f"Raw response: {text[:EXCERPT_CHARS]}...")
        else:
            message = f"HTTP status {http_status}."
            if text:
                message += f" Response excerpt: {text[:EXCERPT_CHARS]}..."
        return _failure(message, http_status, text)

    if not isinstance(data, dict):
        return _failure(f"Unexpected response shape (HTTP {http_status}): {text[:EXCERPT_CHARS]}",
                        http_status, data)

    code = data.get("code")
    msg = data.get("msg")
    msg_lower = str(msg).lower() if msg is not None else ""

    for rule in task.rules():
        if not _matches(rule, ok, code, msg_lower):
            continue
        if rule.kind == RuleKind.SUCCESS:
            return TaskResult(verdict=Verdict.SUCCESS, succeeded=True, message=_success_message(data),
                              http_status=http_status, details=data)
        if rule.kind in (RuleKind.ALREADY_DONE_CODE, RuleKind.ALREADY_DONE_KEYWORD):
            return TaskResult(verdict=Verdict.ALREADY_DONE, succeeded=True, already_completed=True,
                              message=f"Already completed today (API code: {code})",
                              http_status=http_status, details=data)
        if rule.kind == RuleKind.POSSIBLY_DONE_CODE:
            return TaskResult(verdict=Verdict.POSSIBLY_DONE, succeeded=False, already_completed=True,
                              message=f"System error, task possibly already completed today (API code: {code})",
                              http_status=http_status, details=data)

    reason = msg or data.get("message") or "unknown error"
    return _failure(f"API code: {code if code is not None else 'N/A'}, API message: {reason}",
                    http_status, data)


def _parse_json(text: str) -> Optional[Any]:
    if not text:
        return None
    try:
        return orjson.loads(text)
    except orjson.JSONDecodeError:
        return None


def _matches(rule: ClassificationRule, ok: bool, code: Any, msg_lower: str) -> bool:
    keywords = [k.lower() for k in rule.keywords if k]
    if rule.kind == RuleKind.SUCCESS:
        return ok and code == rule.code and (not keywords or any(k in msg_lower for k in keywords))
    if rule.kind == RuleKind.ALREADY_DONE_KEYWORD:
        return any(k in msg_lower for k in keywords)
    return code == rule.code


def _success_message(data: dict) -> str:
    message = f"API message: {data.get('msg') or 'OK'}"
    payload = data.get("data")
    if isinstance(payload, dict) and "status" in payload:
        message += f" | data status: {payload['status']}"
    return message


def _failure(message: str, http_status: int, details: Any) -> TaskResult:
    if http_status in (401, 403):
        message += AUTH_HINT
    return TaskResult(verdict=Verdict.FAILURE, succeeded=False, message=message,
                      http_status=http_status, details=details)


def transport_failure(exc: Exception) -> TaskResult:
    return TaskResult(verdict=Verdict.FAILURE, succeeded=False,
                      message=f"Network or client error: {exc}", http_status=500, details=repr(exc))
