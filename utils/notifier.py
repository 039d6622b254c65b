from __future__ import annotations

from typing import Protocol, Sequence

import requests

from models import Learner, LearningUnit
from utils.errors import NotificationError
from utils.logging import get_logger

TELEGRAM_API = "https://api.telegram.org"

logger = get_logger(__name__)


class Notifier(Protocol):
    def prompt(self, learner: Learner, unit: LearningUnit) -> None: ...

    def send_text(self, learner: Learner, text: str) -> None: ...

    def send_words(self, learner: Learner, units: Sequence[LearningUnit]) -> None: ...


def review_prompt_text(unit: LearningUnit) -> str:
    return f'Review: do you remember the word "{unit.word}"? Reply with it if you do.'


def daily_words_text(units: Sequence[LearningUnit]) -> str:
    lines = [f"Words of the day ({len(units)}):", ""]
    for idx, unit in enumerate(units, start=1):
        lines.append(f"{idx}. {unit.word}")
        if unit.part_of_speech:
            lines.append(unit.part_of_speech)
        lines.append(f"Definition: {unit.definition}")
        lines.append(f"Example: {unit.example}")
        lines.append("")
    lines.append("Reply to the prompts today to practise.")
    return "\n".join(lines)


def weekly_summary_text(units: Sequence[LearningUnit], streak: int = 0) -> str:
    lines = ["Your weekly vocabulary summary:", ""]
    for idx, unit in enumerate(units, start=1):
        lines.append(f"{idx}. {unit.word}")
        if unit.definition:
            lines.append(f"   {unit.definition}")
    if streak:
        lines.append("")
        lines.append(f"Current streak: {streak} days")
    return "\n".join(lines)


class TelegramNotifier:
    """Sends messages through the Telegram Bot API."""

    def __init__(self, token: str, timeout: int = 15, session=None):
        if not token:
            raise NotificationError("Telegram token is not configured")
        self.api = f"{TELEGRAM_API}/bot{token}"
        self.timeout = timeout
        self.session = session or requests.Session()

    def _send_message(self, chat_id: str, text: str) -> None:
        try:
            response = self.session.post(
                f"{self.api}/sendMessage",
                data={"chat_id": chat_id, "text": text},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise NotificationError(f"sendMessage to {chat_id} failed: {exc}") from exc
        if response.status_code >= 400:
            raise NotificationError(
                f"sendMessage to {chat_id} returned HTTP {response.status_code}"
            )
        logger.debug("telegram_message_sent", chat_id=chat_id, chars=len(text))

    def prompt(self, learner: Learner, unit: LearningUnit) -> None:
        self._send_message(learner.chat_id, review_prompt_text(unit))

    def send_text(self, learner: Learner, text: str) -> None:
        self._send_message(learner.chat_id, text)

    def send_words(self, learner: Learner, units: Sequence[LearningUnit]) -> None:
        self._send_message(learner.chat_id, daily_words_text(units))
