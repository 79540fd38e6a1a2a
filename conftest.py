import httpx
import pytest

from src.estransport.connectors.http import HttpConnector
from src.estransport.transport.session import TransportSession


class HostRouter:
    """
    Stand-in for a set of search nodes.

    Replies are registered per host name. A host without a reply refuses
    the connection. Every request that reaches the router is recorded.
    """

    def __init__(self):
        self.routes = {}
        self.requests = []

    def add(self, host, reply):
        self.routes[host] = reply

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        reply = self.routes.get(request.url.host)
        if reply is None:
            raise httpx.ConnectError("[Errno 111] Connection refused", request=request)
        if isinstance(reply, Exception):
            raise reply
        if callable(reply):
            return reply(request)
        if isinstance(reply, str):
            reply = reply.encode("utf-8")
        return httpx.Response(200, content=reply)

    @property
    def contacted(self):
        return [r.url.host for r in self.requests]


@pytest.fixture
def router():
    return HostRouter()


@pytest.fixture
def make_session(router):
    sessions = []

    def _make(hosts=("es-1",), **overrides):
        config = {
            "hosts": [{"host": f"http://{h}", "port": 9200} for h in hosts],
            **overrides,
        }
        connector = HttpConnector(
            timeout=config.get("timeout", 30),
            transport=httpx.MockTransport(router),
        )
        session = TransportSession.create(config, connector=connector)
        sessions.append(session)
        return session

    yield _make

    for session in sessions:
        session.destroy()
