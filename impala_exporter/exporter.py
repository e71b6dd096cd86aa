#
# Copyright (c) Granulate. All rights reserved.
# Licensed under the AGPL3 License. See LICENSE.md in the project root for license information.
#
from typing import Dict, Iterable, Iterator, Tuple

from prometheus_client.core import GaugeMetricFamily
from prometheus_client.metrics_core import Metric
from prometheus_client.registry import Collector

from impala_exporter.impala.collector import ImpalaCollector
from impala_exporter.impala.metrics import IMPALA_METRIC_DESCRIPTORS
from impala_exporter.metrics import MetricDescriptor, Sample


class ImpalaExporter(Collector):
    """
    prometheus_client collector wrapping ImpalaCollector. Every scrape of the registry triggers a full poll.
    """

    def __init__(self, collector: ImpalaCollector) -> None:
        self._collector = collector

    def describe(self) -> Iterator[Metric]:
        for descriptor in IMPALA_METRIC_DESCRIPTORS:
            yield self._family(descriptor)

    def collect(self) -> Iterator[Metric]:
        yield from self._families(self._collector.collect())

    @staticmethod
    def _family(descriptor: MetricDescriptor) -> GaugeMetricFamily:
        return GaugeMetricFamily(descriptor.name, descriptor.documentation, labels=list(descriptor.label_names))

    @classmethod
    def _families(cls, samples: Iterable[Sample]) -> Iterator[Metric]:
        # metric name -> label values -> value. A repeated label combination keeps its last value.
        values: Dict[str, Dict[Tuple[str, ...], float]] = {}
        for sample in samples:
            values.setdefault(sample.name, {})[tuple(sample.labels.values())] = float(sample.value)

        for descriptor in IMPALA_METRIC_DESCRIPTORS:
            if descriptor.name not in values:
                continue
            family = cls._family(descriptor)
            for label_values, value in values[descriptor.name].items():
                family.add_metric(list(label_values), value)
            yield family
