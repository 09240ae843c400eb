import copy
import json
import re
from typing import Annotated, Any, Dict, List, Optional, Union

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Discriminator,
    Field,
    PrivateAttr,
    Tag,
    TypeAdapter,
    ValidationError,
    field_validator,
    model_validator,
)

from app.models.domain import (
    Activity,
    Budget,
    ChangeDescriptor,
    ChangeType,
    Day,
    Destination,
    Itinerary,
)


def _to_text(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return value


def _to_optional_text(value: Any) -> Any:
    if value is None:
        return None
    return _to_text(value)


Text = Annotated[str, BeforeValidator(_to_text)]
OptionalText = Annotated[Optional[str], BeforeValidator(_to_optional_text)]


class DocumentModel(BaseModel):
    """Base for itinerary document sections; unknown keys are kept as-is."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    _source: Optional[Dict[str, Any]] = PrivateAttr(default=None)

    @model_validator(mode="wrap")
    @classmethod
    def _keep_source(cls, data: Any, handler):
        model = handler(data)
        if isinstance(data, dict):
            model._source = copy.deepcopy(data)
        return model

    def extra_fields(self) -> Dict[str, Any]:
        return dict(self.model_extra or {})


class ActivitySchema(DocumentModel):
    time: Text = ""
    name: Text = ""
    description: Text = ""
    location: Text = ""
    duration: Text = ""
    cost: Text = ""
    tips: OptionalText = None
    category: OptionalText = None
    booking_required: Optional[bool] = Field(None, alias="bookingRequired")

    def to_domain(self) -> Activity:
        return Activity(
            time=self.time,
            name=self.name,
            description=self.description,
            location=self.location,
            duration=self.duration,
            cost=self.cost,
            tips=self.tips,
            category=self.category,
            booking_required=self.booking_required,
            extras=self.extra_fields(),
            source=self._source,
        )

    @classmethod
    def from_domain(cls, obj: Activity) -> "ActivitySchema":
        return cls.model_validate(
            {
                **obj.extras,
                "time": obj.time,
                "name": obj.name,
                "description": obj.description,
                "location": obj.location,
                "duration": obj.duration,
                "cost": obj.cost,
                "tips": obj.tips,
                "category": obj.category,
                "bookingRequired": obj.booking_required,
            }
        )


class DaySchema(DocumentModel):
    day: int
    date: Text = ""
    destination: Text = ""
    title: Text = ""
    activities: List[ActivitySchema] = Field(default_factory=list)

    @field_validator("activities", mode="before")
    @classmethod
    def _none_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    def to_domain(self) -> Day:
        return Day(
            day=self.day,
            date=self.date,
            destination=self.destination,
            title=self.title,
            activities=[a.to_domain() for a in self.activities],
            extras=self.extra_fields(),
        )


class DestinationSchema(DocumentModel):
    name: Text = ""
    duration: int = 0

    @field_validator("duration", mode="before")
    @classmethod
    def _lenient_duration(cls, value: Any) -> Any:
        if value is None:
            return 0
        if isinstance(value, str):
            match = re.search(r"\d+", value)
            return int(match.group(0)) if match else 0
        return value


class BudgetSchema(DocumentModel):
    total: Text = ""
    breakdown: Dict[str, Text] = Field(default_factory=dict)
    daily_average: Text = Field("", alias="dailyAverage")


class ScheduleSchema(DocumentModel):
    days: List[DaySchema] = Field(default_factory=list)


class AccommodationOptionSchema(DocumentModel):
    name: Text = ""
    type: Text = ""
    price_range: Text = Field("", alias="priceRange")
    location: Text = ""
    highlights: List[str] = Field(default_factory=list)
    rating: OptionalText = None


class MultiOptionRecommendation(DocumentModel):
    destination: Text = ""
    options: List[AccommodationOptionSchema] = Field(default_factory=list)
    booking_tips: OptionalText = Field(None, alias="bookingTips")
    general_tips: OptionalText = Field(None, alias="generalTips")


class SingleOptionRecommendation(AccommodationOptionSchema):
    destination: Text = ""
    suitable_for: OptionalText = Field(None, alias="suitableFor")
    amenities: List[str] = Field(default_factory=list)


def _recommendation_kind(value: Any) -> str:
    if isinstance(value, dict):
        return "multi" if "options" in value else "single"
    return "multi" if isinstance(value, MultiOptionRecommendation) else "single"


AccommodationRecommendation = Annotated[
    Union[
        Annotated[MultiOptionRecommendation, Tag("multi")],
        Annotated[SingleOptionRecommendation, Tag("single")],
    ],
    Discriminator(_recommendation_kind),
]


class AccommodationSchema(DocumentModel):
    recommendations: List[AccommodationRecommendation] = Field(default_factory=list)


def _render_activity(activity: Activity) -> Dict[str, Any]:
    rendered = ActivitySchema.from_domain(activity).model_dump(
        by_alias=True, exclude_none=True
    )
    if activity.source is None:
        return rendered
    document = copy.deepcopy(activity.source)
    original = ActivitySchema.model_validate(activity.source).model_dump(by_alias=True)
    # Only keys whose normalized value changed are written back.
    for key, value in rendered.items():
        if original.get(key) != value:
            document[key] = value
    return document


def _render_day(raw_day: Dict[str, Any], day: Day) -> Dict[str, Any]:
    activities = [_render_activity(a) for a in day.activities]
    if activities == (raw_day.get("activities") or []):
        return raw_day
    return {**raw_day, "activities": activities}


class ItinerarySchema(DocumentModel):
    destinations: List[DestinationSchema] = Field(default_factory=list)
    budget: BudgetSchema = Field(default_factory=BudgetSchema)
    itinerary: ScheduleSchema = Field(default_factory=ScheduleSchema)
    accommodation: Optional[AccommodationSchema] = None

    def to_domain(self) -> Itinerary:
        extras = self.extra_fields()
        if self.accommodation is not None:
            extras["accommodation"] = self.accommodation.model_dump(
                by_alias=True, exclude_none=True
            )
        return Itinerary(
            destinations=[
                Destination(name=d.name, duration=d.duration, extras=d.extra_fields())
                for d in self.destinations
            ],
            budget=Budget(
                total=self.budget.total,
                breakdown=dict(self.budget.breakdown),
                daily_average=self.budget.daily_average,
                extras=self.budget.extra_fields(),
            ),
            days=[d.to_domain() for d in self.itinerary.days],
            extras=extras,
        )

    def to_document(self, updated: Optional[Itinerary] = None) -> Dict[str, Any]:
        """
        The document as it was received, with the activity edits from
        ``updated`` written onto it. Untouched values keep their original
        type and missing keys stay missing.
        """
        if self._source is None:
            document = self.model_dump(by_alias=True, exclude_none=True)
        else:
            document = copy.deepcopy(self._source)
        if updated is None:
            return document
        schedule = document.get("itinerary")
        raw_days = schedule.get("days") if isinstance(schedule, dict) else None
        if not isinstance(raw_days, list):
            return document
        # The engine edits activities only; days keep their order and count.
        schedule["days"] = [
            _render_day(raw_day, day) for raw_day, day in zip(raw_days, updated.days)
        ]
        return document


class ChangeDescriptorSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: ChangeType
    description: Text = ""
    affected_days: List[int] = Field(default_factory=list, alias="affectedDays")
    activity_name: OptionalText = Field(None, alias="activityName")
    before: OptionalText = None
    after: OptionalText = None
    time: OptionalText = None

    @field_validator("type", mode="before")
    @classmethod
    def _normalize_type(cls, value: Any) -> Any:
        return value.strip().lower() if isinstance(value, str) else value

    @field_validator("affected_days", mode="before")
    @classmethod
    def _normalize_days(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, (int, str)):
            return [value]
        return value

    def to_domain(self) -> ChangeDescriptor:
        return ChangeDescriptor(
            type=self.type,
            description=self.description,
            affected_days=list(self.affected_days),
            activity_name=self.activity_name,
            before=self.before,
            after=self.after,
            time=self.time,
        )

    @classmethod
    def from_domain(cls, obj: ChangeDescriptor) -> "ChangeDescriptorSchema":
        return cls(
            type=obj.type,
            description=obj.description,
            affected_days=list(obj.affected_days),
            activity_name=obj.activity_name,
            before=obj.before,
            after=obj.after,
            time=obj.time,
        )


_descriptor_list = TypeAdapter(List[ChangeDescriptorSchema])


def parse_change_descriptors(payload: Any) -> Optional[List[ChangeDescriptor]]:
    """Return descriptors from a decoded payload, or None when it has the wrong shape."""
    if not isinstance(payload, list):
        return None
    try:
        parsed = _descriptor_list.validate_python(payload)
    except ValidationError:
        return None
    return [item.to_domain() for item in parsed]


class ChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str = Field(..., min_length=1)
    itinerary: ItinerarySchema
    chat_history: List[Dict[str, Any]] = Field(default_factory=list, alias="chatHistory")


class ChatResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    response: str
    updated_itinerary: Optional[Dict[str, Any]] = Field(None, alias="updatedItinerary")
    changes: List[ChangeDescriptorSchema] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)
    requires_confirmation: bool = Field(False, alias="requiresConfirmation")


class ApplyChangesRequest(BaseModel):
    itinerary: ItinerarySchema
    changes: List[ChangeDescriptorSchema] = Field(default_factory=list)


class ApplyChangesResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    itinerary: Dict[str, Any]
    applied_count: int = Field(0, alias="appliedCount")
    failed: bool = False


class ExtractRequest(BaseModel):
    text: str = ""


class ExtractResponse(BaseModel):
    found: bool
    payload: Any = None


class DestinationSuggestionRequest(BaseModel):
    description: str = ""


class LocationSchema(BaseModel):
    name: str
    country: str
    reason: str
    duration: int


class DestinationSuggestionResponse(BaseModel):
    locations: List[LocationSchema] = Field(default_factory=list)


class DestinationRef(BaseModel):
    name: str


class InterestSuggestionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    destinations: List[DestinationRef] = Field(default_factory=list)
    travel_style: str = Field("balanced", alias="travelStyle")


class InterestCategorySchema(BaseModel):
    name: str
    description: str = ""
    icon: str = ""
    category: str = ""


class InterestSuggestionResponse(BaseModel):
    suggestions: List[InterestCategorySchema] = Field(default_factory=list)


class LocalInsightsRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    destination: str = ""
    interests: List[str] = Field(default_factory=list)
    travel_style: str = Field("balanced", alias="travelStyle")
    budget: str = "moderate"
    dates: str = ""
    duration: int = 3


class LocalEventSchema(BaseModel):
    name: Text = ""
    date: Text = ""
    description: Text = ""
    cost: Text = ""


class LocalInsightsSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    destination: str
    accommodation_tips: List[str] = Field(default_factory=list, alias="accommodationTips")
    local_events: List[LocalEventSchema] = Field(default_factory=list, alias="localEvents")
    transport_tips: List[str] = Field(default_factory=list, alias="transportTips")
    cultural_tips: List[str] = Field(default_factory=list, alias="culturalTips")
    budget_tips: List[str] = Field(default_factory=list, alias="budgetTips")
    seasonal_advice: List[str] = Field(default_factory=list, alias="seasonalAdvice")
    hidden_gems: List[str] = Field(default_factory=list, alias="hiddenGems")
    food_recommendations: List[str] = Field(default_factory=list, alias="foodRecommendations")
    safety_tips: List[str] = Field(default_factory=list, alias="safetyTips")
