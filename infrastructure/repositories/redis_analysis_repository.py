#!/usr/bin/env python3

import logging
from datetime import datetime, timezone
from typing import List, Sequence

from domain.entities.analysis import PersonNetworkMetrics
from domain.repositories.analysis_repository import NetworkAnalysisRepository
from services.events.change_notifier import ChangeNotifier
from services.redis.redis_cache import RedisCache
from shared.shared import ChangeChannel

logger = logging.getLogger(__name__)


class RedisNetworkAnalysisRepository(NetworkAnalysisRepository):
    """Redis implementation of the per-person metrics store"""

    def __init__(self, cache: RedisCache, notifier: ChangeNotifier = None):
        self.cache = cache
        self.notifier = notifier

    def _get_analysis_key(self) -> str:
        return "network:analysis"

    def save_analysis(self, metrics: Sequence[PersonNetworkMetrics]) -> int:
        rows = {
            row["person_id"]: row
            for row in self.cache.get_json_list(self._get_analysis_key())
            if row.get("person_id")
        }
        for metric in metrics:
            rows[metric.person_id] = metric.to_dict()

        if not self.cache.set_json_list(self._get_analysis_key(), list(rows.values())):
            logger.error(f"Failed to store network analysis for {len(metrics)} people")
            return 0

        if self.notifier:
            self.notifier.publish(
                ChangeChannel.NETWORK_ANALYSIS, {"updated": [m.person_id for m in metrics]}
            )
        return len(metrics)

    def list_analysis(self) -> List[PersonNetworkMetrics]:
        rows = []
        for data in self.cache.get_json_list(self._get_analysis_key()):
            try:
                rows.append(PersonNetworkMetrics.from_dict(data))
            except (KeyError, ValueError) as e:
                logger.warning(f"Skipping stored analysis row: {e}")
        oldest = datetime.min.replace(tzinfo=timezone.utc)
        rows.sort(key=lambda row: row.analyzed_at or oldest, reverse=True)
        return rows
