"""
Applies change descriptors produced by the generator to an itinerary.

References coming from the generator are unreliable, so a missing day or an
unmatched activity only skips that one instruction. A descriptor that lacks
the fields its type needs fails the whole batch and the caller gets the
original itinerary back.
"""

from __future__ import annotations

import copy
import logging
import random
import re
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Protocol, Sequence

from app.models.domain import (
    Activity,
    ChangeDescriptor,
    ChangeType,
    Day,
    Itinerary,
)

logger = logging.getLogger(__name__)

ADDED_ACTIVITY_DURATION = "2 hours"
ADDED_ACTIVITY_COST = "Free"
ADDED_ACTIVITY_TIPS = "Added based on your request"
ADDED_ACTIVITY_CATEGORY = "custom"
DEFAULT_TIME_SLOTS = ("9:00 AM", "10:30 AM", "1:00 PM", "3:30 PM", "6:00 PM", "8:00 PM")
COST_KEYWORDS = ("budget", "cost", "expensive", "cheaper")
BUDGET_FRIENDLY = "Budget-friendly"

_CLOCK = re.compile(r"(\d{1,2})(?::(\d{2}))?(?:\s*([ap])\.?\s*m\b)?", re.IGNORECASE)
_DOLLAR_AMOUNT = re.compile(r"\$\d+")


def parse_time_of_day(value: Optional[str]) -> int:
    """Minutes since midnight for strings like "9:00 AM" or "14:30"; 0 if unparseable."""
    match = _CLOCK.search(value or "")
    if not match:
        return 0
    hour = int(match.group(1))
    minutes = int(match.group(2) or 0)
    meridiem = (match.group(3) or "").lower()
    if meridiem == "a" and hour == 12:
        hour = 0
    elif meridiem == "p" and hour < 12:
        hour += 12
    if hour > 23 or minutes > 59:
        return 0
    return hour * 60 + minutes


def sort_activities(day: Day) -> None:
    day.activities.sort(key=lambda activity: parse_time_of_day(activity.time))


def cost_from_text(text: str) -> str:
    # "free" wins over a dollar figure even when both appear.
    lowered = text.lower()
    if "free" in lowered:
        return "Free"
    match = _DOLLAR_AMOUNT.search(text)
    if match:
        return match.group(0)
    return BUDGET_FRIENDLY


def mentions_cost(text: Optional[str]) -> bool:
    lowered = (text or "").lower()
    return any(keyword in lowered for keyword in COST_KEYWORDS)


def find_activity_index(day: Day, name: str) -> Optional[int]:
    needle = name.strip().lower()
    for index, activity in enumerate(day.activities):
        if needle in (activity.name or "").lower():
            return index
    return None


class ChangeObserver(Protocol):
    def applied(self, change: ChangeDescriptor, day_number: int, detail: str) -> None:
        ...

    def skipped(
        self, change: ChangeDescriptor, day_number: Optional[int], reason: str
    ) -> None:
        ...

    def failed(self, change: Optional[ChangeDescriptor], error: Exception) -> None:
        ...


class LoggingChangeObserver:
    def applied(self, change: ChangeDescriptor, day_number: int, detail: str) -> None:
        logger.info("Applied %s on day %s: %s", change.type.value, day_number, detail)

    def skipped(
        self, change: ChangeDescriptor, day_number: Optional[int], reason: str
    ) -> None:
        logger.info(
            "Skipped %s %r on day %s: %s",
            change.type.value,
            change.activity_name,
            day_number,
            reason,
        )

    def failed(self, change: Optional[ChangeDescriptor], error: Exception) -> None:
        logger.warning("Change batch failed at %r: %s", change, error)


@dataclass
class ApplyResult:
    itinerary: Itinerary
    applied_count: int = 0
    applied_changes: List[ChangeDescriptor] = field(default_factory=list)
    failed: bool = False
    error: Optional[str] = None


def _add_activity(day: Day, change: ChangeDescriptor, rng: random.Random) -> Optional[str]:
    name = (change.activity_name or "").strip()
    activity = Activity(
        time=(change.time or "").strip() or rng.choice(DEFAULT_TIME_SLOTS),
        name=name,
        description=(change.after or "").strip(),
        location=day.destination,
        duration=ADDED_ACTIVITY_DURATION,
        cost=ADDED_ACTIVITY_COST,
        tips=ADDED_ACTIVITY_TIPS,
        category=ADDED_ACTIVITY_CATEGORY,
    )
    day.activities.append(activity)
    sort_activities(day)
    return f"added {name!r} at {activity.time}"


def _remove_activity(day: Day, change: ChangeDescriptor, rng: random.Random) -> Optional[str]:
    index = find_activity_index(day, change.activity_name or "")
    if index is None:
        return None
    removed = day.activities.pop(index)
    return f"removed {removed.name!r}"


def _modify_activity(day: Day, change: ChangeDescriptor, rng: random.Random) -> Optional[str]:
    requested_name = (change.activity_name or "").strip()
    index = find_activity_index(day, requested_name)
    if index is None:
        return None
    activity = day.activities[index]
    original_name = activity.name
    after = (change.after or "").strip()

    if ":" in after:
        new_name, _, new_description = after.partition(":")
        if new_name.strip():
            activity.name = new_name.strip()
        if new_description.strip():
            activity.description = new_description.strip()
    elif requested_name != activity.name:
        activity.name = requested_name
        activity.description = after
    else:
        activity.description = after

    if mentions_cost(change.description):
        activity.cost = cost_from_text(after)
    return f"modified {original_name!r}"


_HANDLERS: Dict[ChangeType, Callable[[Day, ChangeDescriptor, random.Random], Optional[str]]] = {
    ChangeType.addition: _add_activity,
    ChangeType.removal: _remove_activity,
    ChangeType.modification: _modify_activity,
}


def apply_changes(
    itinerary: Itinerary,
    changes: Sequence[ChangeDescriptor],
    observer: Optional[ChangeObserver] = None,
    rng: Optional[random.Random] = None,
) -> ApplyResult:
    """
    Apply changes in order to a deep copy of the itinerary.

    The input itinerary is never modified. applied_count is the number of
    descriptors that changed at least one day.
    """
    observer = observer or LoggingChangeObserver()
    rng = rng or random.Random()
    updated = copy.deepcopy(itinerary)
    applied: List[ChangeDescriptor] = []
    current: Optional[ChangeDescriptor] = None

    try:
        for change in changes:
            current = change
            if not change.affected_days:
                observer.skipped(change, None, "no affected days")
                continue
            change.validate()
            handler = _HANDLERS[change.type]
            changed_any = False
            for day_number in change.affected_days:
                day = updated.find_day(day_number)
                if day is None:
                    observer.skipped(change, day_number, "day not found")
                    continue
                detail = handler(day, change, rng)
                if detail is None:
                    observer.skipped(change, day_number, "activity not found")
                    continue
                observer.applied(change, day_number, detail)
                changed_any = True
            if changed_any:
                applied.append(change)
    except (ValueError, TypeError, AttributeError, KeyError) as exc:
        observer.failed(current, exc)
        return ApplyResult(itinerary=itinerary, failed=True, error=str(exc))

    return ApplyResult(itinerary=updated, applied_count=len(applied), applied_changes=applied)
