from __future__ import annotations

import random
from typing import Any, Dict, Iterable, List, Optional, Protocol

from models import LearningUnitCreate

LOCAL_WORDS: List[Dict[str, str]] = [
    {"word": "ebullient", "part_of_speech": "adjective", "definition": "cheerful and full of energy",
     "example": "Her ebullient personality lit the room."},
    {"word": "laconic", "part_of_speech": "adjective", "definition": "using very few words",
     "example": "His laconic reply ended the discussion."},
    {"word": "perspicacious", "part_of_speech": "adjective", "definition": "having keen insight",
     "example": "A perspicacious student noticed the flaw."},
    {"word": "obfuscate", "part_of_speech": "verb", "definition": "to make something unclear",
     "example": "The memo seemed written to obfuscate the facts."},
    {"word": "ephemeral", "part_of_speech": "adjective", "definition": "lasting a very short time",
     "example": "Fame on the internet is often ephemeral."},
    {"word": "sanguine", "part_of_speech": "adjective", "definition": "optimistic in a bad situation",
     "example": "She remained sanguine about the delayed launch."},
    {"word": "equanimity", "part_of_speech": "noun", "definition": "calmness under pressure",
     "example": "He met the bad news with equanimity."},
    {"word": "cogent", "part_of_speech": "adjective", "definition": "clear, logical and convincing",
     "example": "She made a cogent case for the budget."},
    {"word": "mitigate", "part_of_speech": "verb", "definition": "to make less severe",
     "example": "Planting trees can mitigate flood damage."},
    {"word": "ubiquitous", "part_of_speech": "adjective", "definition": "found everywhere",
     "example": "Smartphones are ubiquitous on the train."},
    {"word": "alacrity", "part_of_speech": "noun", "definition": "brisk and cheerful readiness",
     "example": "He accepted the invitation with alacrity."},
    {"word": "recalcitrant", "part_of_speech": "adjective", "definition": "stubbornly uncooperative",
     "example": "The recalcitrant printer jammed again."},
]


class WordSource(Protocol):
    def next_words(self, count: int, exclude: Iterable[str] = ()) -> List[LearningUnitCreate]: ...


class LocalWordSource:
    """Draws words from a built-in list, never repeating a word in ``exclude``."""

    def __init__(self, extra: Optional[List[Dict[str, Any]]] = None, rng: Optional[random.Random] = None):
        self.entries = LOCAL_WORDS + list(extra or [])
        self.rng = rng or random.Random()

    def next_words(self, count: int, exclude: Iterable[str] = ()) -> List[LearningUnitCreate]:
        used = {word.lower() for word in exclude}
        candidates = [entry for entry in self.entries if entry["word"].lower() not in used]
        self.rng.shuffle(candidates)
        return [
            LearningUnitCreate(
                word=entry["word"],
                part_of_speech=entry.get("part_of_speech", ""),
                definition=entry.get("definition", ""),
                example=entry.get("example", ""),
                source="local",
            )
            for entry in candidates[:count]
        ]
