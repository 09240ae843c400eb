import copy
import random

from app.models.domain import ChangeDescriptor, ChangeType
from app.services.itinerary_editor import (
    ADDED_ACTIVITY_TIPS,
    DEFAULT_TIME_SLOTS,
    apply_changes,
    parse_time_of_day,
)


class RecordingObserver:
    def __init__(self):
        self.events = []

    def applied(self, change, day_number, detail):
        self.events.append(("applied", change.activity_name, day_number))

    def skipped(self, change, day_number, reason):
        self.events.append(("skipped", change.activity_name, day_number, reason))

    def failed(self, change, error):
        self.events.append(("failed", change.activity_name if change else None, str(error)))


def _names(day):
    return [a.name for a in day.activities]


def test_parse_time_of_day():
    assert parse_time_of_day("9:00 AM") == 540
    assert parse_time_of_day("12:00 AM") == 0
    assert parse_time_of_day("12:30 PM") == 750
    assert parse_time_of_day("3:30 pm") == 930
    assert parse_time_of_day("7pm") == 1140
    assert parse_time_of_day("14:15") == 855
    assert parse_time_of_day("noon") == 0
    assert parse_time_of_day("") == 0
    assert parse_time_of_day(None) == 0


def test_addition_inserts_one_activity_in_time_order(itinerary):
    change = ChangeDescriptor(
        type=ChangeType.addition,
        description="Add lunch",
        affected_days=[1],
        activity_name="Tasca Lunch",
        after="Petiscos at a local tasca",
        time="1:00 PM",
    )

    result = apply_changes(itinerary, [change])

    day = result.itinerary.find_day(1)
    assert _names(day) == ["Guided City Tour", "Tasca Lunch", "Fado Dinner"]
    added = day.activities[1]
    assert added.description == "Petiscos at a local tasca"
    assert added.location == "Lisbon"
    assert added.cost == "Free"
    assert added.duration == "2 hours"
    assert added.tips == ADDED_ACTIVITY_TIPS
    assert result.applied_count == 1
    assert not result.failed


def test_addition_without_time_uses_a_default_slot(itinerary):
    change = ChangeDescriptor(
        type=ChangeType.addition,
        affected_days=[3],
        activity_name="River Walk",
        after="Stroll along the Douro",
    )

    result = apply_changes(itinerary, [change], rng=random.Random(7))

    day = result.itinerary.find_day(3)
    assert len(day.activities) == 2
    added = next(a for a in day.activities if a.name == "River Walk")
    assert added.time in DEFAULT_TIME_SLOTS
    times = [parse_time_of_day(a.time) for a in day.activities]
    assert times == sorted(times)


def test_input_itinerary_is_never_mutated(itinerary):
    before = copy.deepcopy(itinerary)
    changes = [
        ChangeDescriptor(
            type=ChangeType.removal, affected_days=[1], activity_name="Fado Dinner"
        ),
        ChangeDescriptor(
            type=ChangeType.modification,
            description="cheaper option",
            affected_days=[2],
            activity_name="Sunset Cruise",
            after="Ferry ride for $5",
        ),
    ]

    result = apply_changes(itinerary, changes)

    assert itinerary == before
    assert result.itinerary is not itinerary
    assert _names(result.itinerary.find_day(1)) == ["Guided City Tour"]


def test_removal_of_missing_activity_changes_nothing(itinerary):
    observer = RecordingObserver()
    change = ChangeDescriptor(
        type=ChangeType.removal, affected_days=[1], activity_name="Helicopter Ride"
    )

    result = apply_changes(itinerary, [change], observer=observer)

    assert result.itinerary == itinerary
    assert result.applied_count == 0
    assert observer.events == [("skipped", "Helicopter Ride", 1, "activity not found")]


def test_removal_matches_case_insensitive_substring(itinerary):
    change = ChangeDescriptor(type=ChangeType.removal, affected_days=[2], activity_name="sunset")
    result = apply_changes(itinerary, [change])
    assert _names(result.itinerary.find_day(2)) == ["Jeronimos Monastery"]


def test_empty_affected_days_is_a_no_op(itinerary):
    observer = RecordingObserver()
    # Missing fields would fail validation, but the descriptor is skipped first.
    change = ChangeDescriptor(type=ChangeType.addition, description="Add something")

    result = apply_changes(itinerary, [change], observer=observer)

    assert not result.failed
    assert result.itinerary == itinerary
    assert observer.events == [("skipped", None, None, "no affected days")]


def test_budget_modification_renames_and_sets_free_cost(itinerary):
    change = ChangeDescriptor(
        type=ChangeType.modification,
        description="Replace with a budget option",
        affected_days=[1],
        activity_name="Guided City Tour",
        after="Budget City Walk: A free self-guided route",
    )

    result = apply_changes(itinerary, [change])

    activity = result.itinerary.find_day(1).activities[0]
    assert activity.name == "Budget City Walk"
    assert activity.description == "A free self-guided route"
    assert activity.cost == "Free"
    assert activity.time == "9:00 AM"


def test_cost_takes_dollar_amount_or_budget_friendly(itinerary):
    changes = [
        ChangeDescriptor(
            type=ChangeType.modification,
            description="Make it cheaper",
            affected_days=[2],
            activity_name="Sunset Cruise",
            after="Shared ferry crossing for $8 per person",
        ),
        ChangeDescriptor(
            type=ChangeType.modification,
            description="Lower the cost",
            affected_days=[2],
            activity_name="Jeronimos Monastery",
            after="Visit on a discount morning",
        ),
    ]

    result = apply_changes(itinerary, changes)

    monastery, cruise = result.itinerary.find_day(2).activities
    assert cruise.description == "Shared ferry crossing for $8 per person"
    assert cruise.cost == "$8"
    assert monastery.cost == "Budget-friendly"


def test_free_wins_over_dollar_amount(itinerary):
    change = ChangeDescriptor(
        type=ChangeType.modification,
        description="budget tweak",
        affected_days=[3],
        activity_name="Port Cellar Visit",
        after="Free tasting, optional $10 upgrade",
    )
    result = apply_changes(itinerary, [change])
    assert result.itinerary.find_day(3).activities[0].cost == "Free"


def test_cost_untouched_without_cost_keywords(itinerary):
    change = ChangeDescriptor(
        type=ChangeType.modification,
        description="Make it more fun",
        affected_days=[3],
        activity_name="Port Cellar Visit",
        after="Tasting with a free cheese board",
    )
    result = apply_changes(itinerary, [change])
    activity = result.itinerary.find_day(3).activities[0]
    assert activity.description == "Tasting with a free cheese board"
    assert activity.cost == "$25"


def test_modification_with_empty_name_part_keeps_name(itinerary):
    change = ChangeDescriptor(
        type=ChangeType.modification,
        affected_days=[3],
        activity_name="Port Cellar",
        after=": Tasting at a smaller family cellar",
    )
    result = apply_changes(itinerary, [change])
    activity = result.itinerary.find_day(3).activities[0]
    assert activity.name == "Port Cellar Visit"
    assert activity.description == "Tasting at a smaller family cellar"


def test_unknown_day_is_skipped_without_error(itinerary):
    observer = RecordingObserver()
    change = ChangeDescriptor(
        type=ChangeType.addition,
        affected_days=[99],
        activity_name="Ghost Tour",
        after="Spooky walk",
    )

    result = apply_changes(itinerary, [change], observer=observer)

    assert not result.failed
    assert result.applied_count == 0
    assert result.itinerary == itinerary
    assert observer.events == [("skipped", "Ghost Tour", 99, "day not found")]


def test_malformed_descriptor_fails_whole_batch(itinerary):
    observer = RecordingObserver()
    changes = [
        ChangeDescriptor(
            type=ChangeType.removal, affected_days=[1], activity_name="Fado Dinner"
        ),
        ChangeDescriptor(type=ChangeType.addition, affected_days=[2], activity_name="Picnic"),
    ]

    result = apply_changes(itinerary, changes, observer=observer)

    assert result.failed
    assert result.itinerary is itinerary
    assert result.applied_count == 0
    assert _names(itinerary.find_day(1)) == ["Guided City Tour", "Fado Dinner"]
    assert observer.events[-1][0] == "failed"
    assert observer.events[-1][1] == "Picnic"


def test_applied_count_counts_descriptors(itinerary):
    change = ChangeDescriptor(
        type=ChangeType.addition,
        affected_days=[1, 2],
        activity_name="Pastel de Nata Stop",
        after="Grab a custard tart",
        time="11:00 AM",
    )
    result = apply_changes(itinerary, [change])
    assert result.applied_count == 1
    assert result.applied_changes == [change]
    assert "Pastel de Nata Stop" in _names(result.itinerary.find_day(2))


def test_modification_without_colon_renames_to_requested_name(itinerary):
    change = ChangeDescriptor(
        type=ChangeType.modification,
        affected_days=[1],
        activity_name="City Tour",
        after="A shorter loop",
    )

    result = apply_changes(itinerary, [change])

    activity = result.itinerary.find_day(1).activities[0]
    assert activity.name == "City Tour"
    assert activity.description == "A shorter loop"
    assert activity.cost == "$40"


def test_cheaper_city_tour_becomes_free_walk(itinerary):
    change = ChangeDescriptor(
        type=ChangeType.modification,
        description="switch to a cheaper option",
        affected_days=[1],
        activity_name="City Tour",
        after="Budget City Walk: A free self-guided route",
    )

    result = apply_changes(itinerary, [change])

    activity = result.itinerary.find_day(1).activities[0]
    assert activity.name == "Budget City Walk"
    assert activity.description == "A free self-guided route"
    assert activity.cost == "Free"
