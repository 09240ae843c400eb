import copy

import pytest

from app.models.schemas import ItinerarySchema

SAMPLE_DOCUMENT = {
    "overview": "Three days between Lisbon and Porto.",
    "destinations": [
        {"name": "Lisbon", "duration": 2, "localCurrency": "EUR"},
        {"name": "Porto", "duration": 1},
    ],
    "budget": {
        "total": "$1,200",
        "breakdown": {"accommodation": "$600", "food": "$300", "activities": "$300"},
        "dailyAverage": "$400",
        "savingTips": ["Buy a Viva Viagem card"],
    },
    "accommodation": {
        "recommendations": [
            {
                "destination": "Lisbon",
                "options": [{"name": "Alfama Guesthouse", "type": "guesthouse", "priceRange": "$$"}],
            },
            {"destination": "Porto", "name": "Ribeira Loft", "type": "apartment", "priceRange": "$$"},
        ]
    },
    "itinerary": {
        "days": [
            {
                "day": 1,
                "date": "2025-05-01",
                "destination": "Lisbon",
                "title": "Old town",
                "theme": "history",
                "activities": [
                    {
                        "time": "9:00 AM",
                        "name": "Guided City Tour",
                        "description": "Walk through Alfama with a guide",
                        "location": "Alfama",
                        "duration": "3 hours",
                        "cost": "$40",
                    },
                    {
                        "time": "7:00 PM",
                        "name": "Fado Dinner",
                        "description": "Traditional music and dinner",
                        "location": "Bairro Alto",
                        "duration": "2 hours",
                        "cost": "$60",
                        "bookingRequired": True,
                    },
                ],
            },
            {
                "day": 2,
                "date": "2025-05-02",
                "destination": "Lisbon",
                "title": "Belem",
                "activities": [
                    {
                        "time": "9:00 AM",
                        "name": "Jeronimos Monastery",
                        "description": "Manueline architecture",
                        "location": "Belem",
                        "duration": "2 hours",
                        "cost": "$12",
                    },
                    {
                        "time": "3:00 PM",
                        "name": "Sunset Cruise",
                        "description": "Tagus river cruise",
                        "location": "Belem",
                        "duration": "2 hours",
                        "cost": "$35",
                    },
                ],
            },
            {
                "day": 3,
                "date": "2025-05-03",
                "destination": "Porto",
                "title": "Ribeira",
                "activities": [
                    {
                        "time": "10:00 AM",
                        "name": "Port Cellar Visit",
                        "description": "Tasting in Gaia",
                        "location": "Vila Nova de Gaia",
                        "duration": "2 hours",
                        "cost": "$25",
                    }
                ],
            },
        ]
    },
}


@pytest.fixture
def document() -> dict:
    return copy.deepcopy(SAMPLE_DOCUMENT)


@pytest.fixture
def itinerary(document):
    return ItinerarySchema.model_validate(document).to_domain()
