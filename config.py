import tomllib
import shutil
from pathlib import Path
from typing import Any, Dict, Optional
from dotenv import load_dotenv
import os

CONFIG_DIR = Path.home() / ".dailyword"
CONFIG_PATH = CONFIG_DIR / "config.toml"
PROJECT_CONFIG_EXAMPLE = Path(__file__).parent / "config.toml"

def load_config() -> Dict[str, Any]:
    """Load config from ~/.dailyword/config.toml, copy example if missing, load .env overrides."""
    load_dotenv()  # Load .env for overrides (e.g., TELEGRAM_TOKEN)
    if not CONFIG_PATH.exists():
        CONFIG_DIR.mkdir(parents=True, exist_ok=True)
        shutil.copy(PROJECT_CONFIG_EXAMPLE, CONFIG_PATH)
    with open(CONFIG_PATH, "rb") as f:
        config = tomllib.load(f)

    schedule_cfg = config.get("schedule", {})
    config["schedule"] = {
        "initial_interval_days": int(os.getenv(
            "INITIAL_INTERVAL_DAYS", schedule_cfg.get("initial_interval_days", 2)
        )),
        "growth_multiplier": float(os.getenv(
            "GROWTH_MULTIPLIER", schedule_cfg.get("growth_multiplier", 2.5)
        )),
        "min_interval_days": int(os.getenv(
            "MIN_INTERVAL_DAYS", schedule_cfg.get("min_interval_days", 1)
        )),
    }
    telegram_cfg = config.get("telegram", {})
    config["telegram"] = {
        "token": os.getenv("TELEGRAM_TOKEN", telegram_cfg.get("token", "")),
        "timeout": int(os.getenv("TELEGRAM_TIMEOUT", telegram_cfg.get("timeout", 15))),
    }
    grading_cfg = config.get("grading", {})
    config["grading"] = {
        "levenshtein_threshold": float(os.getenv(
            "LEVENSHTEIN_THRESHOLD", grading_cfg.get("levenshtein_threshold", 0.85)
        )),
    }
    cron_cfg = config.get("cron", {})
    config["cron"] = {
        "secret": os.getenv("CRON_SECRET", cron_cfg.get("secret", "")),
        "delivery_workers": int(cron_cfg.get("delivery_workers", 4)),
    }
    words_cfg = config.get("words", {})
    config["words"] = {
        "extra": list(words_cfg.get("extra", [])),
    }
    return config

def get_config_value(section: str, key: str, default: Optional[Any] = None) -> Any:
    """Get nested config value, e.g., get_config_value('schedule', 'growth_multiplier')."""
    config = load_config()
    value = config.get(section, {}).get(key, default)
    return value
