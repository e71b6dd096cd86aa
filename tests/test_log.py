#
# Copyright (c) Granulate. All rights reserved.
# Licensed under the AGPL3 License. See LICENSE.md in the project root for license information.
#
import logging

import pytest
from pytest import LogCaptureFixture

from impala_exporter.log import ExporterFormatter, get_logger_adapter


def test_logger_name_must_be_under_root() -> None:
    with pytest.raises(AssertionError):
        get_logger_adapter("requests")


def test_structured_extras(caplog: LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO)
    logger = get_logger_adapter("impala_exporter.tests")

    logger.info("Fetched", impala_server="10.11.18.16:25000", samples=14)

    record = caplog.records[-1]
    assert record.getMessage() == "Fetched"
    assert record.__dict__["extra"] == {"impala_server": "10.11.18.16:25000", "samples": 14}
    formatted = ExporterFormatter("%(message)s").format(record)
    assert formatted == "Fetched (impala_server=10.11.18.16:25000, samples=14)"


def test_exception_info_is_kept(caplog: LogCaptureFixture) -> None:
    logger = get_logger_adapter("impala_exporter.tests")
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        logger.exception("Failed", impala_server="a:25000")

    record = caplog.records[-1]
    assert record.exc_info is not None
    assert record.__dict__["extra"] == {"impala_server": "a:25000"}
