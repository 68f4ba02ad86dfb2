"""Random, Kubernetes-safe resource names of the form adjective-name."""

from __future__ import annotations

import random

ADJECTIVES = (
    "admiring", "adoring", "affectionate", "agitated", "amazing", "angry",
    "awesome", "beautiful", "blissful", "bold", "boring", "brave", "busy",
    "charming", "clever", "cool", "compassionate", "competent", "condescending",
    "confident", "cranky", "crazy", "dazzling", "determined", "distracted",
    "dreamy", "eager", "ecstatic", "elastic", "elated", "elegant", "eloquent",
    "epic", "exciting", "fervent", "festive", "flamboyant", "focused",
    "friendly", "frosty", "funny", "gallant", "gifted", "goofy", "gracious",
    "great", "happy", "hardcore", "heuristic", "hopeful", "hungry",
    "infallible", "inspiring", "interesting", "intelligent", "jolly", "jovial",
    "keen", "kind", "laughing", "loving", "lucid", "magical", "mystifying",
    "modest", "musing", "naughty", "nervous", "nice", "nifty", "nostalgic",
    "objective", "optimistic", "peaceful", "pedantic", "pensive", "practical",
    "priceless", "quirky", "quizzical", "recursing", "relaxed", "reverent",
    "romantic", "sad", "serene", "sharp", "silly", "sleepy", "stoic",
    "strange", "stupefied", "suspicious", "sweet", "tender", "thirsty",
    "trusting", "unruffled", "upbeat", "vibrant", "vigilant", "vigorous",
    "wizardly", "wonderful", "xenodochial", "youthful", "zealous", "zen",
)

NAMES = (
    "karolina", "rafal", "krzysztof", "michal", "mateusz", "tomasz",
    "marcin", "damian", "filip", "artur", "karol", "maciej",
)

_random = random.Random()


def generate_name(is_suffix: bool = False) -> str:
    """Return "adjective-name", followed by one digit when is_suffix is true."""
    name = f"{_random.choice(ADJECTIVES)}-{_random.choice(NAMES)}"
    if is_suffix:
        name = f"{name}{_random.randrange(10)}"
    return name