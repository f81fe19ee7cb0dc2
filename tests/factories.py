"""Input payloads shared by the service and API tests"""

from datetime import date, timedelta


def upcoming_payload(section_order: int, **overrides):
    """Valid camelCase input for an upcoming entry releasing next month."""
    payload = {
        "title": f"Upcoming {section_order}",
        "type": "movie",
        "genres": ["Drama"],
        "releaseDate": (date.today() + timedelta(days=30)).isoformat(),
        "description": "Coming soon",
        "sectionOrder": section_order,
    }
    payload.update(overrides)
    return payload


def content_payload(**overrides):
    payload = {
        "title": "The Long Night",
        "type": "movie",
        "genres": ["Drama", "Thriller"],
        "duration": "2h 5m",
        "rating": "PG-13",
        "releaseYear": 2023,
    }
    payload.update(overrides)
    return payload
