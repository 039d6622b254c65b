from pathlib import Path

import pytest

import config
from db import database


def _write_test_config(config_path: Path) -> None:
    config_path.write_text(
        "\n".join(
            [
                "[schedule]",
                "initial_interval_days = 2",
                "growth_multiplier = 2.5",
                "min_interval_days = 1",
                "",
                "[telegram]",
                "token = \"test-token\"",
                "timeout = 5",
                "",
                "[grading]",
                "levenshtein_threshold = 0.85",
                "",
                "[cron]",
                "secret = \"\"",
                "delivery_workers = 2",
            ]
        ),
        encoding="utf-8",
    )


@pytest.fixture
def config_dir(tmp_path, monkeypatch):
    config_dir = tmp_path / ".dailyword"
    config_dir.mkdir()
    config_path = config_dir / "config.toml"
    _write_test_config(config_path)
    for var in ("TELEGRAM_TOKEN", "CRON_SECRET", "GROWTH_MULTIPLIER", "INITIAL_INTERVAL_DAYS", "MIN_INTERVAL_DAYS"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setattr(config, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(config, "CONFIG_PATH", config_path)
    monkeypatch.setattr(database, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(database, "DB_PATH", config_dir / "dailyword.db")
    return config_dir


@pytest.fixture
def conn(config_dir):
    database.init_db()
    with database.get_conn() as conn:
        yield conn
