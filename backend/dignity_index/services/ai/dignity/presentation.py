"""Score-to-presentation mapping for the evaluator page.

All functions are pure. ``description`` returns an empty string for values
outside 1–8 instead of clamping.
"""

from __future__ import annotations

DESCRIPTIONS: dict[int, str] = {
    1: "Level one escalates from violent words to violent actions.",
    2: "Level two accuses the other side of promoting evil.",
    3: "Level three attacks the other side's moral character.",
    4: "Level four mocks and attacks the other side's background or beliefs.",
    5: "Level five listens to other views and explains own goals.",
    6: "Level six works with others to find common ground.",
    7: "Level seven fully engages with the other side to discuss disagreements.",
    8: "Seeing oneself in every human being, offering dignity to everyone.",
}

BADGE_CLASSES: dict[str, str] = {
    "default": "badge-default",
    "destructive": "badge-destructive",
    "success": "badge-success",
    "warning": "badge-warning",
    "secondary": "badge-secondary",
}

SCORE_COLOR_CLASSES: dict[str, str] = {
    "red": "text-red",
    "orange": "text-orange",
    "blue": "text-blue",
    "green": "text-green",
}


def badge_variant(score: int) -> str:
    if score <= 2:
        return "destructive"
    if score <= 4:
        return "warning"
    if score <= 6:
        return "secondary"
    return "success"


def score_color(score: int) -> str:
    if score <= 2:
        return "red"
    if score <= 4:
        return "orange"
    if score <= 6:
        return "blue"
    return "green"


def description(score: int) -> str:
    if isinstance(score, bool):
        return ""
    return DESCRIPTIONS.get(score, "")


def category_label(category: str) -> str:
    return "Contempt" if category == "contempt" else "Dignity"


def score_display(score: int) -> str:
    return f"{score}/8"


def score_percent(score: int) -> float:
    """Progress bar width in percent (8 is a full bar)."""
    return score * 12.5


def present(score: int, category: str) -> dict[str, str | float]:
    """Everything the page and the JSON API render for one result."""
    return {
        "category_label": category_label(category),
        "badge_variant": badge_variant(score),
        "score_color": score_color(score),
        "description": description(score),
        "score_display": score_display(score),
        "score_percent": score_percent(score),
    }
