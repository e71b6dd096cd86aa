#
# Copyright (c) Granulate. All rights reserved.
# Licensed under the AGPL3 License. See LICENSE.md in the project root for license information.
#
import logging
import signal
import sys
from threading import Event
from types import FrameType
from typing import List, Optional

import configargparse
from prometheus_client import REGISTRY, start_http_server
from prometheus_client.registry import CollectorRegistry

from impala_exporter import __version__
from impala_exporter.exceptions import NoTargetsConfiguredError
from impala_exporter.exporter import ImpalaExporter
from impala_exporter.exporter_types import port_number, positive_integer, positive_timespan, targets_list
from impala_exporter.impala.client import DEFAULT_REQUEST_TIMEOUT, ImpalaClient
from impala_exporter.impala.collector import ImpalaCollector
from impala_exporter.log import get_logger_adapter, initial_root_logger_setup

logger: logging.LoggerAdapter = get_logger_adapter("impala_exporter")

DEFAULT_PORT = 8080
DEFAULT_LISTEN_ADDRESS = "0.0.0.0"
DEFAULT_WORKERS = 1

DEFAULT_LOG_MAX_SIZE = 1024 * 1024 * 5
DEFAULT_LOG_BACKUP_COUNT = 1

_stop_event = Event()


def stop_handler(sig: int, frame: Optional[FrameType]) -> None:
    _stop_event.set()


def setup_signals() -> None:
    signal.signal(signal.SIGINT, stop_handler)
    signal.signal(signal.SIGTERM, stop_handler)


def parse_cmd_args(argv: Optional[List[str]] = None) -> configargparse.Namespace:
    parser = configargparse.ArgumentParser(
        description="Prometheus exporter for Impala daemons: polls the sessions and in-flight queries pages of"
        " each server on every scrape.",
        auto_env_var_prefix="impala_exporter_",
        add_config_file_help=True,
        add_env_var_help=False,
        default_config_files=["/etc/impala-exporter/config.ini"],
    )
    parser.add_argument("--config", is_config_file=True, help="Config file path")
    parser.add_argument(
        "--impala-servers",
        "--impala_servers",
        dest="impala_servers",
        type=targets_list,
        default=[],
        help="Comma-separated list of Impala server addresses (e.g., 10.11.18.16:25000,10.11.18.17:25000)",
    )
    parser.add_argument(
        "--port",
        type=port_number,
        default=DEFAULT_PORT,
        help="The port to expose metrics on (default: %(default)s)",
    )
    parser.add_argument(
        "--listen-address",
        dest="listen_address",
        default=DEFAULT_LISTEN_ADDRESS,
        help="The address to expose metrics on (default: %(default)s)",
    )
    parser.add_argument(
        "--timeout",
        type=positive_timespan,
        default=DEFAULT_REQUEST_TIMEOUT,
        help="Timeout of each request to an Impala server, human friendly timespans are supported"
        " (for example: '10s', '1m'). Default: %(default)s seconds",
    )
    parser.add_argument(
        "--workers",
        type=positive_integer,
        default=DEFAULT_WORKERS,
        help="Number of Impala servers polled in parallel during a scrape (default: %(default)s)",
    )

    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument("-v", "--verbose", action="store_true", default=False, dest="verbose")

    logging_options = parser.add_argument_group("logging")
    logging_options.add_argument("--log-file", action="store", type=str, dest="log_file", default=None)
    logging_options.add_argument(
        "--log-rotate-max-size",
        action="store",
        type=positive_integer,
        dest="log_rotate_max_size",
        default=DEFAULT_LOG_MAX_SIZE,
    )
    logging_options.add_argument(
        "--log-rotate-backup-count",
        action="store",
        type=positive_integer,
        dest="log_rotate_backup_count",
        default=DEFAULT_LOG_BACKUP_COUNT,
    )

    return parser.parse_args(argv)


def build_exporter(args: configargparse.Namespace) -> ImpalaExporter:
    if not args.impala_servers:
        raise NoTargetsConfiguredError(
            "Please provide at least one Impala server address using the --impala-servers flag."
        )
    collector = ImpalaCollector(args.impala_servers, ImpalaClient(timeout=args.timeout), max_workers=args.workers)
    return ImpalaExporter(collector)


def serve(exporter: ImpalaExporter, port: int, listen_address: str, registry: CollectorRegistry = REGISTRY) -> None:
    registry.register(exporter)
    start_http_server(port, addr=listen_address, registry=registry)
    logger.info(f"Starting server on {listen_address}:{port}/metrics")
    _stop_event.wait()
    logger.info("Stopping")


def main() -> None:
    args = parse_cmd_args()

    global logger
    logger = initial_root_logger_setup(
        logging.DEBUG if args.verbose else logging.INFO,
        args.log_file,
        args.log_rotate_max_size,
        args.log_rotate_backup_count,
    )

    try:
        exporter = build_exporter(args)
    except NoTargetsConfiguredError as e:
        logger.error(str(e))
        sys.exit(1)

    logger.info("Running Impala exporter", version=__version__, impala_servers=args.impala_servers)
    setup_signals()
    try:
        serve(exporter, args.port, args.listen_address)
    except OSError as e:
        logger.error(f"Error starting HTTP server: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
