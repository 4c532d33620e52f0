import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

import settings
from domain.entities.network import Connection, Person
from domain.exceptions import InvalidInputError

logger = logging.getLogger(__name__)

INITIAL_RADIUS = 10.0
INITIAL_ANGLE = math.pi * (3 - math.sqrt(5))
DISTANCE_MIN2 = 1.0
JIGGLE_SCALE = 1e-6


@dataclass
class LayoutConfig:
    """
    Physical parameters of the simulation.

    ``collide_radius`` is the radius of each node, so two colliding nodes are pushed
    apart until their centres are ``2 * collide_radius`` apart. ``convergence_threshold``
    of 0 keeps the fixed-iteration contract; a positive value stops early once the
    largest per-tick displacement falls below it.
    """

    link_distance: float = field(default_factory=lambda: settings.LAYOUT_LINK_DISTANCE)
    charge_strength: float = field(
        default_factory=lambda: settings.LAYOUT_CHARGE_STRENGTH
    )
    collide_radius: float = field(default_factory=lambda: settings.LAYOUT_COLLIDE_RADIUS)
    iterations: int = field(default_factory=lambda: settings.LAYOUT_ITERATIONS)
    seed: int = field(default_factory=lambda: settings.LAYOUT_SEED)
    convergence_threshold: float = field(
        default_factory=lambda: settings.LAYOUT_CONVERGENCE_THRESHOLD
    )
    center_x: float = 0.0
    center_y: float = 0.0
    collide_strength: float = 1.0
    velocity_decay: float = 0.4
    alpha: float = 1.0
    alpha_min: float = 0.001
    alpha_target: float = 0.0

    def __post_init__(self):
        if self.iterations < 0:
            raise InvalidInputError("iterations must be >= 0", field="iterations")
        if self.link_distance < 0:
            raise InvalidInputError("link_distance must be >= 0", field="link_distance")
        if self.collide_radius < 0:
            raise InvalidInputError("collide_radius must be >= 0", field="collide_radius")
        if not 0.0 <= self.velocity_decay <= 1.0:
            raise InvalidInputError(
                "velocity_decay must be within [0, 1]", field="velocity_decay"
            )
        if self.convergence_threshold < 0:
            raise InvalidInputError(
                "convergence_threshold must be >= 0", field="convergence_threshold"
            )

    @property
    def alpha_decay(self) -> float:
        return 1 - self.alpha_min ** (1 / 300)


@dataclass
class _Link:
    source: int
    target: int
    strength: float
    bias: float


class _Simulation:
    """Velocity-Verlet style simulation with link, many-body, centering and collision forces"""

    def __init__(self, n: int, links: List[Tuple[int, int, int]], config: LayoutConfig):
        self.config = config
        self.n = n
        self.rng = np.random.default_rng(config.seed)
        self.alpha = config.alpha

        indices = np.arange(n)
        radius = INITIAL_RADIUS * np.sqrt(0.5 + indices)
        angle = indices * INITIAL_ANGLE
        self.x = radius * np.cos(angle)
        self.y = radius * np.sin(angle)
        self.vx = np.zeros(n)
        self.vy = np.zeros(n)

        self.links = self._initialize_links(links)

    def _initialize_links(self, links: List[Tuple[int, int, int]]) -> List[_Link]:
        count = np.zeros(self.n)
        for source, target, _ in links:
            count[source] += 1
            count[target] += 1

        max_meetings = max((weight for _, _, weight in links), default=0)
        initialized = []
        for source, target, weight in links:
            base_strength = 1.0 / min(count[source], count[target])
            # proportional to meeting count, never stronger than the degree-based default
            strength = base_strength * (weight / max_meetings if max_meetings else 0.0)
            bias = count[source] / (count[source] + count[target])
            initialized.append(_Link(source, target, strength, bias))
        return initialized

    def _jiggle(self, size=None):
        return (self.rng.random(size) - 0.5) * JIGGLE_SCALE

    def tick(self) -> float:
        cfg = self.config
        self.alpha += (cfg.alpha_target - self.alpha) * cfg.alpha_decay

        self._apply_links()
        self._apply_many_body()
        self._apply_center()
        self._apply_collide()

        self.vx *= 1 - cfg.velocity_decay
        self.vy *= 1 - cfg.velocity_decay
        self.x += self.vx
        self.y += self.vy

        if self.n == 0:
            return 0.0
        return float(np.max(np.hypot(self.vx, self.vy)))

    def _apply_links(self) -> None:
        distance = self.config.link_distance
        for link in self.links:
            s, t = link.source, link.target
            x = self.x[t] + self.vx[t] - self.x[s] - self.vx[s]
            y = self.y[t] + self.vy[t] - self.y[s] - self.vy[s]
            if x == 0:
                x = self._jiggle()
            if y == 0:
                y = self._jiggle()
            length = math.sqrt(x * x + y * y)
            length = (length - distance) / length * self.alpha * link.strength
            x *= length
            y *= length
            self.vx[t] -= x * link.bias
            self.vy[t] -= y * link.bias
            self.vx[s] += x * (1 - link.bias)
            self.vy[s] += y * (1 - link.bias)

    def _apply_many_body(self) -> None:
        if self.n < 2:
            return
        dx = self.x[np.newaxis, :] - self.x[:, np.newaxis]
        dy = self.y[np.newaxis, :] - self.y[:, np.newaxis]
        off_diagonal = ~np.eye(self.n, dtype=bool)

        zero_x = (dx == 0) & off_diagonal
        if zero_x.any():
            dx[zero_x] = self._jiggle(int(zero_x.sum()))
        zero_y = (dy == 0) & off_diagonal
        if zero_y.any():
            dy[zero_y] = self._jiggle(int(zero_y.sum()))

        l2 = dx * dx + dy * dy
        close = l2 < DISTANCE_MIN2
        l2[close] = np.sqrt(DISTANCE_MIN2 * l2[close])
        np.fill_diagonal(l2, 1.0)

        weight = np.where(off_diagonal, self.config.charge_strength * self.alpha / l2, 0.0)
        self.vx += np.sum(dx * weight, axis=1)
        self.vy += np.sum(dy * weight, axis=1)

    def _apply_center(self) -> None:
        if self.n == 0:
            return
        self.x -= np.mean(self.x) - self.config.center_x
        self.y -= np.mean(self.y) - self.config.center_y

    def _apply_collide(self) -> None:
        radius = self.config.collide_radius
        if self.n < 2 or radius <= 0:
            return
        reach = radius + radius
        weight = 0.5  # equal radii split each correction evenly
        for i in range(self.n - 1):
            xi = self.x[i] + self.vx[i]
            yi = self.y[i] + self.vy[i]
            others = slice(i + 1, self.n)
            x = xi - self.x[others] - self.vx[others]
            y = yi - self.y[others] - self.vy[others]
            l2 = x * x + y * y
            overlapping = l2 < reach * reach
            if not overlapping.any():
                continue

            x = x[overlapping]
            y = y[overlapping]
            l2 = l2[overlapping]
            zero_x = x == 0
            if zero_x.any():
                x[zero_x] = self._jiggle(int(zero_x.sum()))
                l2[zero_x] += x[zero_x] ** 2
            zero_y = y == 0
            if zero_y.any():
                y[zero_y] = self._jiggle(int(zero_y.sum()))
                l2[zero_y] += y[zero_y] ** 2

            length = np.sqrt(l2)
            factor = (reach - length) / length * self.config.collide_strength
            x *= factor
            y *= factor

            targets = np.arange(i + 1, self.n)[overlapping]
            self.vx[i] += np.sum(x) * weight
            self.vy[i] += np.sum(y) * weight
            self.vx[targets] -= x * (1 - weight)
            self.vy[targets] -= y * (1 - weight)


class ForceLayoutEngine:
    """Computes 2D coordinates for people via a fixed number of simulation ticks"""

    def __init__(self, config: LayoutConfig = None):
        self.config = config or LayoutConfig()

    def layout(
        self,
        people: Sequence[Person],
        connections: Sequence[Connection],
        config: Optional[LayoutConfig] = None,
    ) -> Dict[str, Dict[str, float]]:
        config = config or self.config
        node_ids = self._unique_ids(people)
        if not node_ids:
            return {}

        if len(node_ids) > settings.LAYOUT_LARGE_GRAPH_WARNING:
            logger.warning(
                f"Laying out {len(node_ids)} nodes synchronously; this may block the caller"
            )

        index = {node_id: i for i, node_id in enumerate(node_ids)}
        links = self._build_links(connections, index)

        simulation = _Simulation(len(node_ids), links, config)
        ticks = 0
        for _ in range(config.iterations):
            displacement = simulation.tick()
            ticks += 1
            if config.convergence_threshold and displacement < config.convergence_threshold:
                logger.info(
                    f"Layout converged after {ticks} ticks (displacement={displacement:.5f})"
                )
                break

        logger.info(
            f"Force layout computed for {len(node_ids)} nodes and {len(links)} links "
            f"in {ticks} ticks"
        )
        return {
            node_id: {"x": float(simulation.x[i]), "y": float(simulation.y[i])}
            for node_id, i in index.items()
        }

    def _unique_ids(self, people: Sequence[Person]) -> List[str]:
        return list(dict.fromkeys(person.id for person in people))

    def _build_links(
        self, connections: Sequence[Connection], index: Dict[str, int]
    ) -> List[Tuple[int, int, int]]:
        links = []
        skipped = 0
        for connection in connections:
            source = index.get(connection.person1_id)
            target = index.get(connection.person2_id)
            if source is None or target is None:
                skipped += 1
                continue
            if source == target:
                continue
            links.append((source, target, max(connection.meeting_count, 0)))
        if skipped:
            logger.warning(f"Ignored {skipped} connections with endpoints outside the layout")
        return links
