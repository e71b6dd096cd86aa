#
# Copyright (c) Granulate. All rights reserved.
# Licensed under the AGPL3 License. See LICENSE.md in the project root for license information.
#
from dataclasses import dataclass
from typing import Any, Dict, List

import requests

from impala_exporter.exceptions import ImpalaDecodeError, ImpalaFetchError
from impala_exporter.log import get_logger_adapter

SESSIONS_ENDPOINT = "sessions"
QUERIES_ENDPOINT = "queries"

DEFAULT_REQUEST_TIMEOUT = 10.0

logger = get_logger_adapter(__name__)


@dataclass
class ClientSessionStats:
    hostname: str
    total_connections: int
    total_sessions: int
    total_active_sessions: int
    total_inactive_sessions: int
    inflight_queries: int
    total_queries: int


@dataclass
class InFlightQuery:
    # Kept as received; parsing happens per query so one bad duration doesn't fail the whole payload.
    duration: Any


class ImpalaClient:
    """
    Fetches the JSON status pages of Impala daemons. Every request is a single GET with a bounded timeout,
    no retries and no connection reuse between calls.
    """

    def __init__(self, timeout: float = DEFAULT_REQUEST_TIMEOUT) -> None:
        self._timeout = timeout

    def get_sessions(self, target: str) -> List[ClientSessionStats]:
        response_json = self._rest_request_to_json(target, SESSIONS_ENDPOINT)
        return [
            self._client_from_json(target, client)
            for client in self._get_list(target, SESSIONS_ENDPOINT, response_json, "client_hosts")
        ]

    def get_in_flight_queries(self, target: str) -> List[InFlightQuery]:
        response_json = self._rest_request_to_json(target, QUERIES_ENDPOINT)
        return [
            InFlightQuery(duration=self._ensure_dict(target, QUERIES_ENDPOINT, query).get("duration", ""))
            for query in self._get_list(target, QUERIES_ENDPOINT, response_json, "in_flight_queries")
        ]

    @staticmethod
    def get_url(target: str, endpoint: str) -> str:
        return f"http://{target}/{endpoint}?json"

    def _rest_request(self, target: str, endpoint: str) -> requests.Response:
        url = self.get_url(target, endpoint)
        logger.debug(f"Impala check URL: {url}")
        try:
            response = requests.get(url, timeout=self._timeout)
        except requests.RequestException as e:
            raise ImpalaFetchError(target, endpoint, str(e)) from e

        try:
            response.raise_for_status()
        except requests.HTTPError as e:
            raise ImpalaFetchError(target, endpoint, str(e), status_code=response.status_code) from e
        return response

    def _rest_request_to_json(self, target: str, endpoint: str) -> Any:
        response = self._rest_request(target, endpoint)
        try:
            return response.json()
        except ValueError as e:
            # requests' JSONDecodeError derives from ValueError
            raise ImpalaDecodeError(target, endpoint, f"invalid JSON body: {e}") from e

    @classmethod
    def _get_list(cls, target: str, endpoint: str, response_json: Any, key: str) -> List[Any]:
        value = cls._ensure_dict(target, endpoint, response_json).get(key)
        if value is None:
            return []
        if not isinstance(value, list):
            raise ImpalaDecodeError(target, endpoint, f"{key!r} is not a list")
        return value

    @staticmethod
    def _ensure_dict(target: str, endpoint: str, value: Any) -> Dict[str, Any]:
        if not isinstance(value, dict):
            raise ImpalaDecodeError(target, endpoint, f"expected a JSON object, got {type(value).__name__}")
        return value

    @classmethod
    def _client_from_json(cls, target: str, client_json: Any) -> ClientSessionStats:
        client_json = cls._ensure_dict(target, SESSIONS_ENDPOINT, client_json)

        def counter(field: str) -> int:
            value = client_json.get(field)
            if value is None:
                return 0
            # bool is an int subclass, but true/false is not a valid counter
            if isinstance(value, bool) or not isinstance(value, int):
                raise ImpalaDecodeError(target, SESSIONS_ENDPOINT, f"{field!r} is not an integer: {value!r}")
            return value

        hostname = client_json.get("hostname")
        if hostname is None:
            hostname = ""
        if not isinstance(hostname, str):
            raise ImpalaDecodeError(target, SESSIONS_ENDPOINT, f"'hostname' is not a string: {hostname!r}")

        return ClientSessionStats(
            hostname=hostname,
            total_connections=counter("total_connections"),
            total_sessions=counter("total_sessions"),
            total_active_sessions=counter("total_active_sessions"),
            total_inactive_sessions=counter("total_inactive_sessions"),
            inflight_queries=counter("inflight_queries"),
            total_queries=counter("total_queries"),
        )
