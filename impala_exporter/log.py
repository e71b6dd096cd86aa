#
# Copyright (c) Granulate. All rights reserved.
# Licensed under the AGPL3 License. See LICENSE.md in the project root for license information.
#
import logging
import logging.handlers
import os
import re
import sys
import time
from logging import LogRecord
from typing import Any, Dict, MutableMapping, Optional, Tuple

LOGGER_NAME_RE = re.compile(r"impala_exporter(?:\..+)?")

# keyword arguments that logging.Logger._log() accepts; everything else is structured extra.
_LOGGING_KWARGS = ("exc_info", "stack_info", "stacklevel", "extra")


def get_logger_adapter(logger_name: str) -> logging.LoggerAdapter:
    # Validate the name starts with impala_exporter (the root logger name), so logging parent logger propagation
    # will work.
    assert LOGGER_NAME_RE.match(logger_name) is not None, "logger name must start with 'impala_exporter'"
    return ExporterExtraAdapter(logging.getLogger(logger_name))


class ExporterExtraAdapter(logging.LoggerAdapter):
    """
    Allows passing structured fields as keyword arguments, e.g. logger.warning("Fetch failed", target=target).
    The fields end up in record.extra and are rendered by ExporterFormatter.
    """

    def __init__(self, logger: logging.Logger) -> None:
        super().__init__(logger, {})

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> Tuple[Any, MutableMapping[str, Any]]:
        log_kwargs = {key: kwargs[key] for key in _LOGGING_KWARGS if key in kwargs}
        fields = {key: value for key, value in kwargs.items() if key not in _LOGGING_KWARGS}
        extra = dict(log_kwargs.get("extra") or {})
        extra["extra"] = {**extra.get("extra", {}), **fields}
        log_kwargs["extra"] = extra
        return msg, log_kwargs


class _ExtraFormatter(logging.Formatter):
    def format(self, record: LogRecord) -> str:
        formatted = super().format(record)

        extra: Dict[str, Any] = record.__dict__.get("extra", {})
        formatted_extra = ", ".join(f"{k}={v}" for k, v in extra.items())
        if formatted_extra:
            formatted = f"{formatted} ({formatted_extra})"

        return formatted


class _UTCFormatter(logging.Formatter):
    # Patch formatTime to be GMT (UTC) for all formatters,
    # see https://docs.python.org/3/library/logging.html?highlight=formattime#logging.Formatter.formatTime
    converter = time.gmtime


class ExporterFormatter(_ExtraFormatter, _UTCFormatter):
    pass


def initial_root_logger_setup(
    stream_level: int,
    log_file_path: Optional[str],
    rotate_max_bytes: int,
    rotate_backup_count: int,
) -> logging.LoggerAdapter:
    logger_adapter = get_logger_adapter("impala_exporter")
    logger_adapter.setLevel(logging.DEBUG)

    stream_handler = logging.StreamHandler(stream=sys.stdout)
    stream_handler.setLevel(stream_level)
    if stream_level < logging.INFO:
        stream_handler.setFormatter(ExporterFormatter("[%(asctime)s] %(levelname)s: %(name)s: %(message)s"))
    else:
        stream_handler.setFormatter(ExporterFormatter("[%(asctime)s] %(levelname)s: %(message)s", "%H:%M:%S"))
    logger_adapter.logger.addHandler(stream_handler)

    if log_file_path is not None:
        log_dir = os.path.dirname(log_file_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file_path,
            maxBytes=rotate_max_bytes,
            backupCount=rotate_backup_count,
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(ExporterFormatter("[%(asctime)s] %(levelname)s: %(name)s: %(message)s"))
        logger_adapter.logger.addHandler(file_handler)

    return logger_adapter
