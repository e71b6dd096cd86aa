#
# Copyright (c) Granulate. All rights reserved.
# Licensed under the AGPL3 License. See LICENSE.md in the project root for license information.
#
import json
from typing import Any, Dict, List, Union

import requests
from pytest import MonkeyPatch, fixture

from impala_exporter.impala.client import ImpalaClient

ServerReply = Union[Exception, requests.Response]


def make_response(url: str, body: Any, status_code: int = 200) -> requests.Response:
    response = requests.Response()
    response.url = url
    response.status_code = status_code
    response.reason = "OK" if status_code < 400 else "Error"
    response.encoding = "utf-8"
    response._content = body.encode() if isinstance(body, str) else json.dumps(body).encode()
    return response


class FakeImpalaServers:
    """
    Stands in for requests.get: answers by URL from the replies registered by the test, and records every request.
    An unknown URL is a connection error, like an unreachable daemon.
    """

    def __init__(self) -> None:
        self.replies: Dict[str, ServerReply] = {}
        self.requests: List[Dict[str, Any]] = []

    def add(self, target: str, endpoint: str, body: Any, status_code: int = 200) -> None:
        url = ImpalaClient.get_url(target, endpoint)
        self.replies[url] = make_response(url, body, status_code)

    def add_error(self, target: str, endpoint: str, error: Exception) -> None:
        self.replies[ImpalaClient.get_url(target, endpoint)] = error

    def add_server(self, target: str, clients: List[Dict[str, Any]], durations: List[str]) -> None:
        self.add(target, "sessions", {"client_hosts": clients})
        self.add(target, "queries", {"in_flight_queries": [{"duration": duration} for duration in durations]})

    def get(self, url: str, **kwargs: Any) -> requests.Response:
        self.requests.append({"url": url, **kwargs})
        reply = self.replies.get(url)
        if reply is None:
            raise requests.exceptions.ConnectionError(f"Max retries exceeded with url: {url}")
        if isinstance(reply, Exception):
            raise reply
        return reply


@fixture
def impala_servers(monkeypatch: MonkeyPatch) -> FakeImpalaServers:
    servers = FakeImpalaServers()
    monkeypatch.setattr(requests, "get", servers.get)
    return servers


def client_host(hostname: str, base: int = 1) -> Dict[str, Any]:
    return {
        "hostname": hostname,
        "total_connections": base,
        "total_sessions": base + 1,
        "total_active_sessions": base + 2,
        "total_inactive_sessions": base + 3,
        "inflight_queries": base + 4,
        "total_queries": base + 5,
    }


@fixture
def client() -> ImpalaClient:
    return ImpalaClient(timeout=2)
