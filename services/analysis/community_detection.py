import logging
from abc import ABC, abstractmethod
from collections import deque
from typing import Dict

import networkx as nx
import networkx.algorithms.community as nx_comm

import settings
from domain.entities.analysis import NetworkNode
from domain.exceptions import InvalidInputError

logger = logging.getLogger(__name__)

COMMUNITY_LABEL = "community_{}"


class CommunityDetector(ABC):
    """Assigns every node a community label"""

    @abstractmethod
    def detect(self, nodes: Dict[str, NetworkNode]) -> Dict[str, str]:
        pass


class SharedNeighborCommunityDetector(CommunityDetector):
    """
    Flood fill over neighbours that share at least ``min_shared`` connections with
    the node being expanded. A heuristic, not a modularity-optimising algorithm:
    sparse or weakly knit nodes end up as singleton communities.
    """

    def __init__(self, min_shared: int = 2):
        self.min_shared = min_shared

    def detect(self, nodes: Dict[str, NetworkNode]) -> Dict[str, str]:
        communities: Dict[str, str] = {}
        processed = set()
        community_index = 0

        for start_id in nodes:
            if start_id in processed:
                continue
            label = COMMUNITY_LABEL.format(community_index)
            community_index += 1

            queue = deque([start_id])
            while queue:
                current_id = queue.popleft()
                if current_id in processed:
                    continue
                processed.add(current_id)
                communities[current_id] = label

                current = nodes[current_id]
                for neighbor_id in current.connections:
                    neighbor = nodes.get(neighbor_id)
                    if neighbor is None or neighbor_id in processed:
                        continue
                    if current.shared_connections(neighbor) >= self.min_shared:
                        queue.append(neighbor_id)

        return communities


class LouvainCommunityDetector(CommunityDetector):
    """Modularity-based alternative using networkx's seeded Louvain implementation"""

    def __init__(self, seed: int = None, resolution: float = 1.0):
        self.seed = settings.LAYOUT_SEED if seed is None else seed
        self.resolution = resolution

    def detect(self, nodes: Dict[str, NetworkNode]) -> Dict[str, str]:
        if not nodes:
            return {}
        graph = nx.Graph()
        graph.add_nodes_from(nodes)
        for node_id, node in nodes.items():
            for neighbor_id in node.connections:
                if neighbor_id in nodes:
                    graph.add_edge(node_id, neighbor_id)

        found = nx_comm.louvain_communities(
            graph, seed=self.seed, resolution=self.resolution
        )
        order = {node_id: i for i, node_id in enumerate(nodes)}
        ranked = sorted(found, key=lambda members: min(order[m] for m in members))

        communities = {}
        for index, members in enumerate(ranked):
            for member in members:
                communities[member] = COMMUNITY_LABEL.format(index)
        logger.info(f"Louvain detected {len(ranked)} communities")
        return {node_id: communities[node_id] for node_id in nodes}


def get_community_detector(name: str = None) -> CommunityDetector:
    name = name or settings.COMMUNITY_DETECTOR
    if name == "shared_neighbors":
        return SharedNeighborCommunityDetector()
    if name == "louvain":
        return LouvainCommunityDetector()
    raise InvalidInputError(f"Unknown community detector: {name!r}", field="detector")
