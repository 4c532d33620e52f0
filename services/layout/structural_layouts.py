import math
from collections import OrderedDict
from typing import Dict, List, Sequence

from domain.entities.network import Connection, Person
from shared.shared import DEFAULT_COMMUNITY_GROUP

RING_SIZE = 6
RING_SPACING = 150
FIRST_RING_OFFSET = 80
CIRCLE_MIN_RADIUS = 200
CIRCLE_RADIUS_PER_NODE = 15
GROUP_RADIUS = 300
GROUP_MIN_INNER_RADIUS = 60
GROUP_INNER_RADIUS_PER_NODE = 8


def _point(x: float, y: float) -> Dict[str, float]:
    return {"x": float(x), "y": float(y)}


def circular_layout(people: Sequence[Person]) -> Dict[str, Dict[str, float]]:
    """Single circle, highest average rating first"""
    if not people:
        return {}
    ordered = sorted(people, key=lambda p: p.average_rating or 0, reverse=True)
    radius = max(CIRCLE_MIN_RADIUS, len(ordered) * CIRCLE_RADIUS_PER_NODE)
    angle_step = (2 * math.pi) / len(ordered)

    return {
        person.id: _point(math.cos(i * angle_step) * radius, math.sin(i * angle_step) * radius)
        for i, person in enumerate(ordered)
    }


def connection_strength(
    people: Sequence[Person], connections: Sequence[Connection]
) -> Dict[str, int]:
    """Sum of meeting counts over each person's connections"""
    strength = {person.id: 0 for person in people}
    for connection in connections:
        for endpoint in connection.endpoints:
            if endpoint in strength:
                strength[endpoint] += connection.meeting_count
    return strength


def hierarchical_layout(
    people: Sequence[Person], connections: Sequence[Connection]
) -> Dict[str, Dict[str, float]]:
    """Concentric rings of six, most strongly connected people in the centre"""
    if not people:
        return {}
    strength = connection_strength(people, connections)
    ordered = sorted(people, key=lambda p: strength.get(p.id, 0), reverse=True)

    positions = {}
    for index, person in enumerate(ordered):
        level = index // RING_SIZE
        ring_members = min(RING_SIZE, len(ordered) - level * RING_SIZE)
        angle_step = (2 * math.pi) / ring_members
        radius = level * RING_SPACING + (FIRST_RING_OFFSET if level else 0)
        angle = (index % RING_SIZE) * angle_step
        positions[person.id] = _point(math.cos(angle) * radius, math.sin(angle) * radius)
    return positions


def community_layout(people: Sequence[Person]) -> Dict[str, Dict[str, float]]:
    """Group by location (else company) and place each group on its own small circle"""
    if not people:
        return {}
    groups: "OrderedDict[str, List[Person]]" = OrderedDict()
    for person in people:
        key = person.location or person.company or DEFAULT_COMMUNITY_GROUP
        groups.setdefault(key, []).append(person)

    positions = {}
    group_angle_step = (2 * math.pi) / len(groups)
    for group_index, members in enumerate(groups.values()):
        group_angle = group_index * group_angle_step
        center_x = math.cos(group_angle) * GROUP_RADIUS
        center_y = math.sin(group_angle) * GROUP_RADIUS

        inner_radius = max(GROUP_MIN_INNER_RADIUS, len(members) * GROUP_INNER_RADIUS_PER_NODE)
        inner_step = (2 * math.pi) / len(members)
        for member_index, person in enumerate(members):
            angle = member_index * inner_step
            positions[person.id] = _point(
                center_x + math.cos(angle) * inner_radius,
                center_y + math.sin(angle) * inner_radius,
            )
    return positions
