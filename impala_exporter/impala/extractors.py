#
# Copyright (c) Granulate. All rights reserved.
# Licensed under the AGPL3 License. See LICENSE.md in the project root for license information.
#
from typing import Dict, Iterable, List

from impala_exporter.exceptions import DurationParseError
from impala_exporter.impala.client import ClientSessionStats, InFlightQuery
from impala_exporter.impala.duration import parse_duration
from impala_exporter.impala.metrics import (
    CLIENT_LABEL,
    IMPALA_CLIENT_METRICS,
    IMPALA_INFLIGHT_QUERIES_COUNT_METRIC,
    IMPALA_SLOW_QUERIES_THRESHOLDS,
    SERVER_LABEL,
)
from impala_exporter.log import get_logger_adapter
from impala_exporter.metrics import Sample

logger = get_logger_adapter(__name__)


def session_samples(target: str, clients: List[ClientSessionStats]) -> Iterable[Sample]:
    """
    One sample per client and per field of IMPALA_CLIENT_METRICS, in payload order.
    """
    for client in clients:
        labels = {SERVER_LABEL: target, CLIENT_LABEL: client.hostname}
        for field_name, (metric_name, _) in IMPALA_CLIENT_METRICS.items():
            yield Sample(labels, metric_name, getattr(client, field_name))


def query_samples(target: str, queries: List[InFlightQuery]) -> Iterable[Sample]:
    """
    The in-flight queries count, followed by the count of queries slower than each threshold.
    All thresholds are reported, including those no query exceeds.
    """
    labels = {SERVER_LABEL: target}
    yield Sample(labels, IMPALA_INFLIGHT_QUERIES_COUNT_METRIC, len(queries))

    slow_counts: Dict[int, int] = dict.fromkeys(IMPALA_SLOW_QUERIES_THRESHOLDS.keys(), 0)
    for query in queries:
        try:
            duration_seconds = parse_duration(query.duration)
        except DurationParseError as e:
            logger.warning(f"Error parsing duration: {e}", impala_server=target)
            continue

        for threshold in slow_counts:
            if duration_seconds > threshold:
                slow_counts[threshold] += 1

    for threshold, count in slow_counts.items():
        metric_name, _ = IMPALA_SLOW_QUERIES_THRESHOLDS[threshold]
        yield Sample(labels, metric_name, count)
