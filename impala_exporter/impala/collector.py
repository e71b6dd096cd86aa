#
# Copyright (c) Granulate. All rights reserved.
# Licensed under the AGPL3 License. See LICENSE.md in the project root for license information.
#
import concurrent.futures
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Sequence

from impala_exporter.exceptions import ImpalaRequestError
from impala_exporter.impala.client import ImpalaClient
from impala_exporter.impala.extractors import query_samples, session_samples
from impala_exporter.log import get_logger_adapter
from impala_exporter.metrics import MetricsSnapshot, Sample

logger = get_logger_adapter(__name__)


class ImpalaCollector:
    """
    Polls every configured Impala daemon on each call to collect().
    Nothing is kept between scrapes, so concurrent scrapes are independent.
    """

    def __init__(self, targets: Sequence[str], client: Optional[ImpalaClient] = None, *, max_workers: int = 1) -> None:
        assert max_workers > 0, f"invalid max_workers {max_workers!r}"
        self._targets = tuple(targets)
        self._client = client if client is not None else ImpalaClient()
        self._max_workers = max_workers

    def collect(self) -> Iterable[Sample]:
        if self._max_workers == 1 or len(self._targets) <= 1:
            for target in self._targets:
                yield from self._target_samples(target)
        else:
            yield from self._collect_parallel()

    def snapshot(self) -> MetricsSnapshot:
        return MetricsSnapshot(datetime.now(timezone.utc), tuple(self.collect()))

    def _collect_parallel(self) -> Iterable[Sample]:
        with concurrent.futures.ThreadPoolExecutor(
            max_workers=min(self._max_workers, len(self._targets)), thread_name_prefix="impala-collect"
        ) as executor:
            futures = [executor.submit(self._target_samples, target) for target in self._targets]
            # results are consumed in configured order, so the output doesn't depend on completion order
            for future in futures:
                yield from future.result()

    def _target_samples(self, target: str) -> List[Sample]:
        samples: List[Sample] = []
        try:
            samples.extend(self._sessions_metrics(target))
            samples.extend(self._queries_metrics(target))
            logger.debug("Succeeded gathering Impala metrics", impala_server=target, samples=len(samples))
        except Exception:
            logger.exception("Error while trying to collect Impala metrics", impala_server=target)
        return samples

    def _sessions_metrics(self, target: str) -> List[Sample]:
        try:
            clients = self._client.get_sessions(target)
        except ImpalaRequestError as e:
            logger.warning(f"Error fetching sessions: {e}", impala_server=target)
            return []
        return list(session_samples(target, clients))

    def _queries_metrics(self, target: str) -> List[Sample]:
        try:
            queries = self._client.get_in_flight_queries(target)
        except ImpalaRequestError as e:
            logger.warning(f"Error fetching queries: {e}", impala_server=target)
            return []
        return list(query_samples(target, queries))
