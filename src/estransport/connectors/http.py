import httpx
import logging
from typing import Optional, Dict

from src.estransport.version import USER_AGENT

logger = logging.getLogger(__name__)


class HttpConnector:
    """
    Synchronous HTTP connector.

    Owns a single `httpx.Client` that is created on first use and
    reused for every request and every host, so connections are
    kept alive between calls.
    """

    def __init__(self, timeout: float = 30, transport: Optional[httpx.BaseTransport] = None):
        """
        Initialize the HTTP connector.

        Parameters

        timeout : float, optional
            Default request timeout in seconds (default: 30).
        transport : httpx.BaseTransport, optional
            Transport handed to the client, mainly for tests.
        """
        self.timeout = timeout
        self.transport = transport

        self.headers: Dict[str, str] = {
            "Accept": "application/json",
            "charsets": "utf-8",
            "User-Agent": USER_AGENT,
        }

        self._client: Optional[httpx.Client] = None

        logger.info("HTTP Connector initialized | timeout=%ss", self.timeout)

    def __call__(self) -> httpx.Client:
        """
        Callable shortcut for `connect()`.
        """
        return self.connect()

    def _create_client(self) -> httpx.Client:
        logger.info("Creating new HTTP client session")
        return httpx.Client(
            headers=self.headers,
            timeout=self.timeout,
            transport=self.transport,
        )

    def connect(self) -> httpx.Client:
        """
        Get an active HTTP client.

        Creates a new client if one does not already exist,
        otherwise returns the existing instance.
        """
        if self._client is None:
            self._client = self._create_client()
        return self._client

    @property
    def connected(self) -> bool:
        return self._client is not None

    def close(self):
        """
        Close the HTTP client and release resources.

        Safe to call multiple times.
        """
        if self._client:
            logger.info("Closing HTTP client session")
            self._client.close()
            self._client = None
