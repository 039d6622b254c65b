from Levenshtein import ratio as lev_ratio
from typing import Dict, Any
from config import load_config

SHORT_REPLY_MAX_WORDS = 3

def is_short_reply(text: str) -> bool:
    """Recall answers are a few words; longer replies are usage sentences."""
    return len(text.split()) <= SHORT_REPLY_MAX_WORDS

def is_correct_recall(expected_word: str, user_text: str, config: Dict[str, Any] = None) -> bool:
    """Grade a recall answer by containment, falling back to Levenshtein similarity for typos."""
    if not config:
        config = load_config()
    threshold = config.get('grading', {}).get('levenshtein_threshold', 0.85)

    if not user_text or not user_text.strip() or not expected_word:
        return False

    user_clean = user_text.strip().lower()
    expected_clean = expected_word.strip().lower()
    if expected_clean in user_clean:
        return True
    best = max(lev_ratio(token, expected_clean) for token in user_clean.split())
    return best >= threshold
