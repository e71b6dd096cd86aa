#
# Copyright (c) Granulate. All rights reserved.
# Licensed under the AGPL3 License. See LICENSE.md in the project root for license information.
#
from types import MappingProxyType
from typing import Mapping, Tuple

from impala_exporter.metrics import MetricDescriptor

SERVER_LABEL = "impala_server"
CLIENT_LABEL = "impala_client"

SERVER_LABELS = (SERVER_LABEL,)
CLIENT_LABELS = (SERVER_LABEL, CLIENT_LABEL)

# client_hosts[] field -> (metric name, help)
IMPALA_CLIENT_METRICS: Mapping[str, Tuple[str, str]] = MappingProxyType(
    {
        "total_connections": ("impala_total_connections", "Total number of connections for an Impala client"),
        "total_sessions": ("impala_total_sessions", "Total number of sessions for an Impala client"),
        "total_active_sessions": (
            "impala_total_active_sessions",
            "Total number of active sessions for an Impala client",
        ),
        "total_inactive_sessions": (
            "impala_total_inactive_sessions",
            "Total number of inactive sessions for an Impala client",
        ),
        "inflight_queries": ("impala_inflight_queries", "Number of inflight queries for an Impala client"),
        "total_queries": ("impala_total_queries", "Total number of queries for an Impala client"),
    }
)

IMPALA_INFLIGHT_QUERIES_COUNT_METRIC = "impala_inflight_queries_count"
IMPALA_INFLIGHT_QUERIES_COUNT_HELP = "Total number of in-flight queries"

# threshold in seconds -> (metric name, help). Ascending, queries strictly slower than the threshold are counted.
IMPALA_SLOW_QUERIES_THRESHOLDS: Mapping[int, Tuple[str, str]] = MappingProxyType(
    {
        10: ("impala_slow10s_queries_count", "Number of queries slower than 10 seconds"),
        30: ("impala_slow30s_queries_count", "Number of queries slower than 30 seconds"),
        60: ("impala_slow1m_queries_count", "Number of queries slower than 1 minute"),
        120: ("impala_slow2m_queries_count", "Number of queries slower than 2 minutes"),
        180: ("impala_slow3m_queries_count", "Number of queries slower than 3 minutes"),
        300: ("impala_slow5m_queries_count", "Number of queries slower than 5 minutes"),
        600: ("impala_slow10m_queries_count", "Number of queries slower than 10 minutes"),
    }
)

IMPALA_METRIC_DESCRIPTORS: Tuple[MetricDescriptor, ...] = (
    *(MetricDescriptor(name, help_, CLIENT_LABELS) for name, help_ in IMPALA_CLIENT_METRICS.values()),
    MetricDescriptor(IMPALA_INFLIGHT_QUERIES_COUNT_METRIC, IMPALA_INFLIGHT_QUERIES_COUNT_HELP, SERVER_LABELS),
    *(MetricDescriptor(name, help_, SERVER_LABELS) for name, help_ in IMPALA_SLOW_QUERIES_THRESHOLDS.values()),
)
