import pytest
import requests

from models import Learner, LearningUnit
from utils.errors import NotificationError
from utils.notifier import TelegramNotifier, daily_words_text


class _Response:
    def __init__(self, status_code):
        self.status_code = status_code


class _Session:
    def __init__(self, status_code=200, error=None):
        self.status_code = status_code
        self.error = error
        self.calls = []

    def post(self, url, data=None, timeout=None):
        self.calls.append((url, data, timeout))
        if self.error:
            raise self.error
        return _Response(self.status_code)


LEARNER = Learner(id=1, chat_id="4242")
UNIT = LearningUnit(id=1, word="laconic", definition="using very few words", example="A laconic reply.")


def test_prompt_posts_send_message():
    session = _Session()
    TelegramNotifier("abc", timeout=7, session=session).prompt(LEARNER, UNIT)
    url, data, timeout = session.calls[0]
    assert url == "https://api.telegram.org/botabc/sendMessage"
    assert data["chat_id"] == "4242"
    assert '"laconic"' in data["text"]
    assert timeout == 7


def test_http_error_raises_notification_error():
    with pytest.raises(NotificationError):
        TelegramNotifier("abc", session=_Session(status_code=403)).send_text(LEARNER, "hi")


def test_transport_error_raises_notification_error():
    session = _Session(error=requests.ConnectionError("down"))
    with pytest.raises(NotificationError):
        TelegramNotifier("abc", session=session).prompt(LEARNER, UNIT)


def test_missing_token_rejected():
    with pytest.raises(NotificationError):
        TelegramNotifier("")


def test_daily_words_text_lists_words():
    text = daily_words_text([UNIT])
    assert text.startswith("Words of the day (1):")
    assert "1. laconic" in text
    assert "Definition: using very few words" in text
