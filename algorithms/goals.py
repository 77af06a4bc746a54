"""Closed classification of free-text training goals."""

from __future__ import annotations

from enum import Enum


class GoalCategory(str, Enum):
    STRENGTH = "strength"
    FAT_LOSS = "fat_loss"
    GENERAL = "general"


# keyword -> category, checked case-insensitively as substrings
GOAL_KEYWORDS: dict[GoalCategory, tuple[str, ...]] = {
    GoalCategory.STRENGTH: ("strength",),
    GoalCategory.FAT_LOSS: ("fat",),
}

# first match wins
GOAL_PRIORITY: tuple[GoalCategory, ...] = (
    GoalCategory.STRENGTH,
    GoalCategory.FAT_LOSS,
)


def goal_tags(goals: str | None) -> frozenset[GoalCategory]:
    """Return every category mentioned in ``goals``.

    Text that matches no keyword is tagged ``GENERAL`` so the result is
    never empty.
    """
    text = (goals or "").lower()
    found = {
        category
        for category, keywords in GOAL_KEYWORDS.items()
        if any(k in text for k in keywords)
    }
    if not found:
        found.add(GoalCategory.GENERAL)
    return frozenset(found)


def primary_goal(goals: str | None) -> GoalCategory:
    """Return the highest priority category for ``goals``."""
    tags = goal_tags(goals)
    for category in GOAL_PRIORITY:
        if category in tags:
            return category
    return GoalCategory.GENERAL


def first_goal_token(goals: str | None, default: str = "General") -> str:
    """Return the first comma separated goal, stripped."""
    token = (goals or "").split(",")[0].strip()
    return token or default
