import copy

from app.models.domain import ChangeDescriptor, ChangeType
from app.models.schemas import (
    ActivitySchema,
    ItinerarySchema,
    MultiOptionRecommendation,
    SingleOptionRecommendation,
    parse_change_descriptors,
)
from app.services.itinerary_editor import apply_changes


LOOSE_DOCUMENT = {
    "destinations": [{"name": "Rome", "duration": "2 days"}],
    "budget": {"total": 900, "breakdown": {"food": 300}},
    "itinerary": {
        "days": [
            {
                "day": 1,
                "activities": [
                    {"time": "10:00 AM", "name": "Colosseum", "cost": 25, "tips": None},
                    {"time": "4:00 PM", "name": "Trastevere Walk"},
                ],
            },
            {"day": 2, "activities": None},
        ]
    },
}


def test_unedited_document_comes_back_unchanged(document):
    schema = ItinerarySchema.model_validate(document)

    assert schema.to_document(schema.to_domain()) == document
    assert schema.to_document() == document


def test_loose_values_are_not_normalized_on_the_way_out():
    schema = ItinerarySchema.model_validate(copy.deepcopy(LOOSE_DOCUMENT))

    trip = schema.to_domain()
    assert trip.budget.total == "900"
    assert trip.destinations[0].duration == 2

    assert schema.to_document(trip) == LOOSE_DOCUMENT


def test_only_edited_activity_fields_are_written_back():
    schema = ItinerarySchema.model_validate(copy.deepcopy(LOOSE_DOCUMENT))
    change = ChangeDescriptor(
        type=ChangeType.modification,
        description="make it more fun",
        affected_days=[1],
        activity_name="Trastevere",
        after="Trastevere Food Walk: Supplì and gelato stops",
    )

    result = apply_changes(schema.to_domain(), [change])
    rendered = schema.to_document(result.itinerary)

    colosseum, walk = rendered["itinerary"]["days"][0]["activities"]
    assert colosseum == {"time": "10:00 AM", "name": "Colosseum", "cost": 25, "tips": None}
    assert walk == {
        "time": "4:00 PM",
        "name": "Trastevere Food Walk",
        "description": "Supplì and gelato stops",
    }
    assert rendered["budget"] == {"total": 900, "breakdown": {"food": 300}}
    assert rendered["itinerary"]["days"][1] == {"day": 2, "activities": None}


def test_accommodation_recommendations_pick_their_variant(document):
    schema = ItinerarySchema.model_validate(document)
    multi, single = schema.accommodation.recommendations
    assert isinstance(multi, MultiOptionRecommendation)
    assert multi.options[0].price_range == "$$"
    assert isinstance(single, SingleOptionRecommendation)
    assert single.destination == "Porto"


def test_activity_values_are_coerced_to_text():
    activity = ActivitySchema.model_validate({"name": "Tram 28", "cost": 3, "time": None})
    assert activity.cost == "3"
    assert activity.time == ""


def test_missing_sections_default_to_empty():
    itinerary = ItinerarySchema.model_validate({}).to_domain()
    assert itinerary.days == []
    assert itinerary.destinations == []
    assert itinerary.budget.total == ""


def test_parse_change_descriptors_accepts_camel_case():
    parsed = parse_change_descriptors(
        [
            {
                "type": "Modification",
                "description": "Cheaper tour",
                "affectedDays": 2,
                "activityName": "Sunset Cruise",
                "after": "Ferry ride",
            }
        ]
    )
    assert len(parsed) == 1
    assert parsed[0].type is ChangeType.modification
    assert parsed[0].affected_days == [2]
    assert parsed[0].activity_name == "Sunset Cruise"


def test_parse_change_descriptors_rejects_wrong_shapes():
    assert parse_change_descriptors({"type": "addition"}) is None
    assert parse_change_descriptors([{"type": "teleport"}]) is None
    assert parse_change_descriptors([{"type": "removal", "affectedDays": ["soon"]}]) is None
    assert parse_change_descriptors([]) == []
