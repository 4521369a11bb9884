import logging
import httpx

logger = logging.getLogger(__name__)

TELEGRAM_API = "https://api.telegram.org"
MARKDOWN_SPECIALS = ("_", "*", "[", "`")


def escape_markdown(text: str) -> str:
    """Escape the characters Telegram's legacy Markdown treats as entity markers."""
    for char in MARKDOWN_SPECIALS:
        text = text.replace(char, f"\\{char}")
    return text


class TelegramNotifier:
    """Best-effort delivery of run summaries to a Telegram chat.

    Nothing here raises: a missing token, a network error or a rejected
    message is logged and reported through the boolean return value.
    """

    def __init__(self, bot_token: str | None, chat_id: str | None, timeout: float = 30.0,
                 client: httpx.Client | None = None):
        self.bot_token = bot_token
        self.chat_id = chat_id
        self.timeout = timeout
        self.client = client

    @property
    def enabled(self) -> bool:
        return bool(self.bot_token and self.chat_id)

    def notify(self, title: str, body: str) -> bool:
        if not self.enabled:
            logger.info("Telegram notification skipped (token or chat id not configured). Title: %s", title)
            return False

        url = f"{TELEGRAM_API}/bot{self.bot_token}/sendMessage"
        text = f"*{escape_markdown(title)}*\n\n{escape_markdown(body)}"
        payload = {"chat_id": self.chat_id, "text": text, "parse_mode": "Markdown"}
        try:
            r = self._post(url, payload)
            data = r.json() if r.content else {}
        except httpx.HTTPError as e:
            logger.error("Network error sending Telegram notification. Title: %s: %s", title, e)
            return False
        except ValueError:
            logger.error("Telegram returned a non-JSON reply (HTTP %s). Title: %s", r.status_code, title)
            return False

        if r.is_success and isinstance(data, dict) and data.get("ok"):
            logger.info("Telegram notification sent. Title: %s", title)
            return True
        logger.error("Failed to send Telegram notification. Title: %s, HTTP %s: %s", title, r.status_code, data)
        return False

    def _post(self, url: str, payload: dict) -> httpx.Response:
        if self.client is not None:
            return self.client.post(url, json=payload)
        with httpx.Client(timeout=self.timeout) as client:
            return client.post(url, json=payload)
