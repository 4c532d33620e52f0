#!/usr/bin/env python3

from abc import ABC, abstractmethod
from typing import List, Sequence

from domain.entities.analysis import PersonNetworkMetrics


class NetworkAnalysisRepository(ABC):
    """Per-person network metrics store interface"""

    @abstractmethod
    def save_analysis(self, metrics: Sequence[PersonNetworkMetrics]) -> int:
        """Upsert one row per person, returns rows written"""
        pass

    @abstractmethod
    def list_analysis(self) -> List[PersonNetworkMetrics]:
        """Rows ordered by analyzed_at, newest first"""
        pass
