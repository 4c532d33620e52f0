import logging
from typing import Dict, List, Optional, Sequence, Tuple

import settings
from domain.entities.meeting import Meeting, PersonDetail
from domain.entities.network import (
    AggregationResult,
    Connection,
    Person,
    make_pair_key,
)
from domain.exceptions import InvalidInputError
from shared.shared import NEUTRAL_DIMENSION_SCORE, TRUST_DIMENSION_WEIGHTS, TrustDimension
from shared.util import mean

logger = logging.getLogger(__name__)


class EventAggregator:
    """Turns a flat list of meetings into deduplicated people and pair connections"""

    def __init__(self, rating_scale_max: int = None):
        self.rating_scale_max = rating_scale_max or settings.RATING_SCALE_MAX

    def aggregate(
        self,
        meetings: Sequence[Meeting],
        detailed_people: Sequence[PersonDetail] = (),
        community_id: Optional[str] = None,
    ) -> AggregationResult:
        """
        Build people and connections in first-seen order.

        Person statistics always use every meeting. When ``community_id`` is given,
        only people with at least one meeting in that community are returned and
        connections are built from that community's meetings alone.
        """
        if not meetings:
            return AggregationResult(people=[], connections=[])

        for meeting in meetings:
            self._validate(meeting)

        details_by_name = self._index_details(detailed_people)
        people_by_name: Dict[str, Person] = {}
        names_by_id: Dict[str, str] = {}

        for meeting in meetings:
            for name in (meeting.initiator_name, meeting.subject_name):
                if name not in people_by_name:
                    person = self._new_person(name, details_by_name.get(name))
                    self._claim_id(names_by_id, person)
                    people_by_name[name] = person

            for person in {
                meeting.initiator_name: people_by_name[meeting.initiator_name],
                meeting.subject_name: people_by_name[meeting.subject_name],
            }.values():
                person.meetings.append(meeting)
                if not person.location and meeting.location:
                    person.location = meeting.location

        for name, person in people_by_name.items():
            self._compute_person_stats(name, person)

        people = list(people_by_name.values())
        connection_meetings = list(meetings)
        if community_id is not None:
            people = [
                p for p in people if any(m.community_id == community_id for m in p.meetings)
            ]
            connection_meetings = [m for m in meetings if m.community_id == community_id]

        connections = self._build_connections(connection_meetings, people_by_name)

        logger.info(
            f"Aggregated {len(meetings)} meetings into {len(people)} people "
            f"and {len(connections)} connections"
        )
        return AggregationResult(people=people, connections=connections)

    def perceived_rating(self, meeting: Meeting, name: str) -> int:
        """
        Rating that counts toward ``name``'s average: the raw rating when they were
        the subject, the inverted rating (scale max + 1 - rating) when they initiated.
        """
        if meeting.subject_name == name:
            return meeting.rating
        return self.rating_scale_max + 1 - meeting.rating

    def _validate(self, meeting: Meeting) -> None:
        for field_name in ("initiator_name", "subject_name"):
            value = getattr(meeting, field_name, None)
            if value is None or not str(value).strip():
                raise InvalidInputError(
                    f"Meeting {getattr(meeting, 'id', '?')} has no {field_name}",
                    field=field_name,
                )

    def _index_details(
        self, detailed_people: Sequence[PersonDetail]
    ) -> Dict[str, PersonDetail]:
        index: Dict[str, PersonDetail] = {}
        for detail in detailed_people or ():
            index.setdefault(detail.name, detail)
        return index

    def _claim_id(self, names_by_id: Dict[str, str], person: Person) -> None:
        owner = names_by_id.setdefault(person.id, person.name)
        if owner != person.name:
            raise InvalidInputError(
                f"Person id {person.id!r} resolves to both {owner!r} and {person.name!r}",
                field="id",
            )

    def _new_person(self, name: str, detail: Optional[PersonDetail]) -> Person:
        if detail is None:
            return Person(id=name, name=name)
        return Person(
            id=detail.id or name,
            name=name,
            company=detail.company,
            position=detail.position,
            location=detail.location,
            avatar_url=detail.avatar_url,
        )

    def _compute_person_stats(self, name: str, person: Person) -> None:
        person.meeting_count = len(person.meetings)
        person.average_rating = mean(
            self.perceived_rating(meeting, name) for meeting in person.meetings
        )
        person.trust_score = self._composite_trust(person)
        person.connection_count = len(
            {
                meeting.counterpart_of(name)
                for meeting in person.meetings
                if meeting.initiator_name != meeting.subject_name
            }
        )

    def _composite_trust(self, person: Person) -> float:
        scored = [m for m in person.meetings if m.has_dimension_scores]
        if not scored:
            return person.average_rating

        composite = 0.0
        for dimension, weight in TRUST_DIMENSION_WEIGHTS.items():
            if dimension == TrustDimension.TRUSTWORTHINESS.value:
                values = [m.trustworthiness for m in scored]
            else:
                values = [
                    getattr(m, dimension) or NEUTRAL_DIMENSION_SCORE for m in scored
                ]
            composite += mean(values) * weight
        return composite

    def _build_connections(
        self, meetings: Sequence[Meeting], people_by_name: Dict[str, Person]
    ) -> List[Connection]:
        grouped: Dict[Tuple[str, str], Connection] = {}
        ratings: Dict[Tuple[str, str], List[int]] = {}

        for meeting in meetings:
            if meeting.initiator_name == meeting.subject_name:
                logger.warning(f"Skipping self-meeting {meeting.id} for connections")
                continue

            key = tuple(sorted((meeting.initiator_name, meeting.subject_name)))
            connection = grouped.get(key)
            if connection is None:
                connection = Connection(
                    pair_key=make_pair_key(*key),
                    person1_name=meeting.initiator_name,
                    person2_name=meeting.subject_name,
                    person1_id=people_by_name[meeting.initiator_name].id,
                    person2_id=people_by_name[meeting.subject_name].id,
                )
                grouped[key] = connection
                ratings[key] = []

            connection.meeting_count += 1
            ratings[key].append(meeting.rating)
            if connection.last_meeting_at is None or (
                meeting.created_at and meeting.created_at > connection.last_meeting_at
            ):
                connection.last_meeting_at = meeting.created_at

        for key, connection in grouped.items():
            connection.average_rating = mean(ratings[key])

        return list(grouped.values())
