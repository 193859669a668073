"""BaseService — shared foundation for cinemaweb services.

Every service receives the :class:`CinemaSettings` at construction time and
resolves dataset locations through it. Load failures become failed
ServiceResults rather than exceptions.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from cinemaweb.domain.builder import build
from cinemaweb.infrastructure.sources import DatasetLoadError, open_source
from cinemaweb.services.result import ErrorCode, ServiceResult

if TYPE_CHECKING:
    import httpx

    from cinemaweb.config.settings import CinemaSettings
    from cinemaweb.domain.graph import Graph

logger = logging.getLogger(__name__)


class BaseService:
    """Base for all service-layer classes.

    Usage::

        class GraphService(BaseService):
            def build(self, location: str | None = None) -> ServiceResult:
                graph = self._build_graph("build_graph", location)
                if isinstance(graph, ServiceResult):
                    return graph
                ...
    """

    def __init__(self, settings: CinemaSettings, *, client: httpx.Client | None = None) -> None:
        self._settings = settings
        self._client = client

    def _build_graph(self, op: str, location: str | None) -> Graph | ServiceResult:
        """Fetch and build the graph, or return a failed result for *op*."""
        location = location or self._settings.data.source
        if not location:
            return ServiceResult.failure(
                op,
                ErrorCode.NO_SOURCE,
                "No dataset source given and [data] source is not configured",
            )
        source = open_source(location, client=self._client, timeout=self._settings.data.timeout)
        try:
            dataset = source.fetch()
        except DatasetLoadError as exc:
            logger.debug("Dataset load failed", exc_info=True)
            return ServiceResult.failure(
                op,
                ErrorCode.LOAD_FAILED,
                str(exc),
                location=exc.location,
                reason=exc.reason,
            )
        return build(dataset)

    @staticmethod
    def _dropped_warnings(graph: Graph) -> list[str]:
        return [
            f"Work '{ref.work_id}': {ref.relation} '{ref.person_id}' not found, relation dropped"
            for ref in graph.dropped
        ]
