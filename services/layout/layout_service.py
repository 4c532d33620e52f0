import logging
from typing import Dict, Optional, Sequence, Union

from domain.entities.network import Connection, Person
from domain.exceptions import InvalidInputError
from services.aggregation.graph_filters import connections_within
from services.layout.force_layout import ForceLayoutEngine, LayoutConfig
from services.layout.structural_layouts import (
    circular_layout,
    community_layout,
    hierarchical_layout,
)
from shared.shared import LayoutMode

logger = logging.getLogger(__name__)


class LayoutService:
    """Dispatches to the force simulation or one of the structural layouts"""

    def __init__(self, force_engine: ForceLayoutEngine = None):
        self.force_engine = force_engine or ForceLayoutEngine()

    def compute(
        self,
        mode: Union[str, LayoutMode],
        people: Sequence[Person],
        connections: Sequence[Connection],
        config: Optional[LayoutConfig] = None,
    ) -> Dict[str, Dict[str, float]]:
        layout_mode = self._resolve_mode(mode)
        visible_connections = connections_within(people, connections)
        dropped = len(connections) - len(visible_connections)
        if dropped:
            logger.info(f"Dropped {dropped} connections outside the visible people set")

        if layout_mode == LayoutMode.CIRCULAR:
            return circular_layout(people)
        if layout_mode == LayoutMode.HIERARCHICAL:
            return hierarchical_layout(people, visible_connections)
        if layout_mode == LayoutMode.COMMUNITY:
            return community_layout(people)
        return self.force_engine.layout(people, visible_connections, config)

    def _resolve_mode(self, mode: Union[str, LayoutMode]) -> LayoutMode:
        if isinstance(mode, LayoutMode):
            return mode
        try:
            return LayoutMode(mode or LayoutMode.FORCE.value)
        except ValueError as e:
            raise InvalidInputError(f"Unknown layout mode: {mode!r}", field="mode") from e
