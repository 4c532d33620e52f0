from typing import List, Optional, Sequence

from domain.entities.network import Connection, Person
from domain.entities.relationship import Relationship


def filter_people(
    people: Sequence[Person],
    search_term: str = "",
    location: Optional[str] = None,
) -> List[Person]:
    """Case-insensitive name search combined with a location substring filter"""
    term = (search_term or "").lower()
    location_term = (location or "").lower()

    filtered = []
    for person in people:
        if term not in person.name.lower():
            continue
        if location_term and location_term not in (person.location or "").lower():
            continue
        filtered.append(person)
    return filtered


def available_locations(people: Sequence[Person]) -> List[str]:
    locations = []
    for person in people:
        if person.location and person.location not in locations:
            locations.append(person.location)
    return locations


def focus_people(
    people: Sequence[Person],
    connections: Sequence[Connection],
    relationships: Sequence[Relationship],
    person_id: Optional[str],
) -> List[Person]:
    """Restrict to one person and everyone linked to them by a connection or a relationship"""
    if not person_id or not any(p.id == person_id for p in people):
        return list(people)

    related = {person_id}
    for connection in connections:
        other = connection.other(person_id)
        if other is not None:
            related.add(other)
    for relationship in relationships:
        if relationship.involves(person_id):
            related.add(relationship.other(person_id))

    return [p for p in people if p.id in related]


def connections_within(
    people: Sequence[Person], connections: Sequence[Connection]
) -> List[Connection]:
    """Drop connections whose endpoints are not both present"""
    ids = {p.id for p in people}
    return [c for c in connections if c.person1_id in ids and c.person2_id in ids]
