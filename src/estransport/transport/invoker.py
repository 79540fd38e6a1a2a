import logging
from typing import Optional

import httpx

from src.estransport.transport.errors import (
    ResponseTooLargeError,
    TransportFault,
    TransportStatus,
    fault_from_exception,
)

logger = logging.getLogger(__name__)

METHODS = ("GET", "POST", "PUT", "DELETE")


def _perform(client: httpx.Client, session, url: str, method: str, body: Optional[bytes]) -> int:
    """
    Run one request against one host, streaming the body into the session buffer.

    The buffer is only flushed once the host has answered, so a failed
    attempt never discards the previous response. Returns the offset the
    new body starts at.
    """
    headers = {"Content-Type": "application/json"} if body is not None else None
    with client.stream(method, url, content=body, headers=headers, timeout=session.timeout) as response:
        buffer = session.response
        start = buffer.begin_response()
        try:
            for chunk in response.iter_bytes():
                if chunk and buffer.write(chunk) == 0:
                    raise ResponseTooLargeError(
                        f"response from {url} exceeds {buffer.capacity} bytes"
                    )
        except Exception:
            buffer.rollback(start)
            raise
        logger.debug("HTTP %s %s -> %s", method, url, response.status_code)
    return start


def call(session, path: str, method: str, body: Optional[str] = None) -> int:
    """
    Perform one logical request, failing over across the session's hosts.

    Hosts are tried in configured order and the first one that completes
    without a network fault wins. When every host fails the fault code of
    the last attempt is returned. The HTTP status of the exchange is not
    inspected; the body is left in the session's response buffer.

    Returns:
        0 on success, otherwise a TransportStatus or TransportFault code
    """
    if session is None:
        logger.error("transport call without a session")
        return TransportStatus.INPUT

    method = (method or "").upper()
    if method not in METHODS:
        logger.error("Unsupported HTTP method %r", method)
        return TransportStatus.INPUT

    # GET never carries a body, even if one was left over by the caller
    payload = body.encode("utf-8") if body is not None and method != "GET" else None

    client = session.connector.connect()

    ret = TransportFault.GENERIC
    for host in session.hosts:
        url = f"{host.base_url}/{path}"
        try:
            start = _perform(client, session, url, method, payload)
        except (httpx.HTTPError, httpx.InvalidURL, ResponseTooLargeError) as e:
            ret = fault_from_exception(e)
            logger.warning(
                "[%s] %s %s failed with %s (%s), trying next host",
                session.id, method, url, int(ret), e,
            )
            continue
        session.response_offset = start
        return TransportStatus.OK

    logger.error("[%s] %s /%s failed on all %s host(s)", session.id, method, path, len(session.hosts))
    return ret
