from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone

from .engine import GraphEngine
from .pipeline import GraphIngestor, IngestStats

logger = logging.getLogger(__name__)


class GraphRegistry:
    """Owns the published graph and swaps in rebuilt ones.

    A rebuild populates a brand-new `GraphEngine` and publishes it with a
    single reference assignment, so readers holding `current` always see a
    complete graph: either the old one or the new one. Rebuilds are serialized
    by a lock; if one fails, the previous graph stays published.
    """

    def __init__(self, graph: GraphEngine | None = None):
        self._graph = graph if graph is not None else GraphEngine()
        self._lock = asyncio.Lock()
        self.built_at: datetime | None = None
        self.last_stats: IngestStats | None = None

    @property
    def current(self) -> GraphEngine:
        return self._graph

    @property
    def building(self) -> bool:
        return self._lock.locked()

    def publish(self, graph: GraphEngine) -> None:
        self._graph = graph

    async def rebuild(self, ingestor: GraphIngestor) -> IngestStats:
        async with self._lock:
            graph, stats = await ingestor.build()
            self.publish(graph)
            self.built_at = datetime.now(timezone.utc)
            self.last_stats = stats
            logger.info("Published graph with %d nodes, %d edges", stats.nodes, stats.edges)
            return stats
