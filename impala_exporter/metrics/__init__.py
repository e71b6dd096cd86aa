from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Tuple, Union


@dataclass
class Sample:
    # labels keep insertion order: impala_server first, then impala_client for per-client metrics.
    labels: Dict[str, str]
    name: str  # metric name
    value: Union[int, float]


@dataclass
class MetricsSnapshot:
    timestamp: datetime
    samples: Tuple[Sample, ...]


@dataclass(frozen=True)
class MetricDescriptor:
    name: str
    documentation: str
    label_names: Tuple[str, ...]
