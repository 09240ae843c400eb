from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class ChangeType(str, Enum):
    addition = "addition"
    modification = "modification"
    removal = "removal"


class Intent(str, Enum):
    modify_itinerary = "modify_itinerary"
    ask_question = "ask_question"
    get_suggestions = "get_suggestions"
    troubleshoot = "troubleshoot"
    general_chat = "general_chat"


class MalformedChangeError(ValueError):
    """A change descriptor is missing fields required by its type."""


@dataclass
class Activity:
    time: str = ""
    name: str = ""
    description: str = ""
    location: str = ""
    duration: str = ""
    cost: str = ""
    tips: Optional[str] = None
    category: Optional[str] = None
    booking_required: Optional[bool] = None
    extras: Dict[str, Any] = field(default_factory=dict)
    # Raw document entry this activity was read from; None for added ones.
    source: Optional[Dict[str, Any]] = field(default=None, compare=False, repr=False)


@dataclass
class Day:
    day: int
    date: str = ""
    destination: str = ""
    title: str = ""
    activities: List[Activity] = field(default_factory=list)
    extras: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Destination:
    name: str
    duration: int = 0
    extras: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Budget:
    total: str = ""
    breakdown: Dict[str, str] = field(default_factory=dict)
    daily_average: str = ""
    extras: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Itinerary:
    destinations: List[Destination] = field(default_factory=list)
    budget: Budget = field(default_factory=Budget)
    days: List[Day] = field(default_factory=list)
    extras: Dict[str, Any] = field(default_factory=dict)

    def find_day(self, day_number: int) -> Optional[Day]:
        for day in self.days:
            if day.day == day_number:
                return day
        return None

    def destination_names(self) -> List[str]:
        return [d.name for d in self.destinations]


@dataclass
class ChangeDescriptor:
    type: ChangeType
    description: str = ""
    affected_days: List[int] = field(default_factory=list)
    activity_name: Optional[str] = None
    before: Optional[str] = None
    after: Optional[str] = None
    time: Optional[str] = None

    def validate(self) -> None:
        if not (self.activity_name or "").strip():
            raise MalformedChangeError(f"{self.type.value} requires an activity name")
        if self.type in (ChangeType.addition, ChangeType.modification) and not (
            self.after or ""
        ).strip():
            raise MalformedChangeError(f"{self.type.value} requires new content")


@dataclass
class IntentAnalysis:
    intent: Intent
    action: str
    confidence: float
