from enum import IntEnum
from typing import Optional

import httpx


class TransportStatus(IntEnum):
    """Status codes owned by the transport itself."""

    OK = 0
    INPUT = 100
    URL = 101
    PARSE = 102
    ELASTIC = 103
    BUSY = 104


class TransportFault(IntEnum):
    """
    Network level fault codes.

    Kept in the 1..89 range and numbered like the libcurl codes
    callers of the old client already know.
    """

    UNSUPPORTED_PROTOCOL = 1
    GENERIC = 2
    URL_MALFORMAT = 3
    COULDNT_RESOLVE_HOST = 6
    COULDNT_CONNECT = 7
    WEIRD_SERVER_REPLY = 8
    WRITE_ERROR = 23
    OPERATION_TIMEDOUT = 28
    TOO_MANY_REDIRECTS = 47
    SEND_ERROR = 55
    RECV_ERROR = 56


FAULT_RANGE_END = 90

_STATUS_MESSAGES = {
    TransportStatus.OK: "No error",
    TransportStatus.INPUT: "Input error",
    TransportStatus.URL: "URL error",
    TransportStatus.PARSE: "Parse error",
    TransportStatus.ELASTIC: "Elastic error",
    TransportStatus.BUSY: "Session busy",
}

_FAULT_MESSAGES = {
    TransportFault.UNSUPPORTED_PROTOCOL: "Unsupported protocol",
    TransportFault.GENERIC: "Failed to perform request",
    TransportFault.URL_MALFORMAT: "URL using bad/illegal format or missing URL",
    TransportFault.COULDNT_RESOLVE_HOST: "Couldn't resolve host name",
    TransportFault.COULDNT_CONNECT: "Couldn't connect to server",
    TransportFault.WEIRD_SERVER_REPLY: "Weird server reply",
    TransportFault.WRITE_ERROR: "Failed writing received data to the response buffer",
    TransportFault.OPERATION_TIMEDOUT: "Timeout was reached",
    TransportFault.TOO_MANY_REDIRECTS: "Number of redirects hit maximum amount",
    TransportFault.SEND_ERROR: "Failed sending data to the peer",
    TransportFault.RECV_ERROR: "Failure when receiving data from the peer",
}


class TransportError(Exception):
    """Base class for failures raised inside the transport."""

    status: int = TransportStatus.INPUT

    def __init__(self, message: str = "", status: Optional[int] = None):
        super().__init__(message)
        if status is not None:
            self.status = status


class InputError(TransportError):
    status = TransportStatus.INPUT


class UrlError(TransportError):
    status = TransportStatus.URL


class ParseError(TransportError):
    status = TransportStatus.PARSE


class SerializationError(TransportError):
    """A JSON value could not be re-emitted."""

    status = TransportStatus.PARSE


class SerializationOverflowError(SerializationError):
    """The serialized text did not fit the destination."""


class SessionBusyError(TransportError):
    status = TransportStatus.BUSY


class ResponseTooLargeError(TransportError):
    """A response body did not fit the session's response buffer."""

    status = TransportFault.WRITE_ERROR


def fault_from_exception(exc: Exception) -> int:
    """Map an exception raised during one host attempt to a fault code."""
    if isinstance(exc, ResponseTooLargeError):
        return TransportFault.WRITE_ERROR
    if isinstance(exc, httpx.TimeoutException):
        return TransportFault.OPERATION_TIMEDOUT
    if isinstance(exc, httpx.ConnectError):
        text = str(exc).lower()
        if "name or service not known" in text or "nodename nor servname" in text:
            return TransportFault.COULDNT_RESOLVE_HOST
        return TransportFault.COULDNT_CONNECT
    if isinstance(exc, httpx.UnsupportedProtocol):
        return TransportFault.UNSUPPORTED_PROTOCOL
    if isinstance(exc, httpx.InvalidURL):
        return TransportFault.URL_MALFORMAT
    if isinstance(exc, httpx.RemoteProtocolError):
        return TransportFault.WEIRD_SERVER_REPLY
    if isinstance(exc, httpx.WriteError):
        return TransportFault.SEND_ERROR
    if isinstance(exc, httpx.ReadError):
        return TransportFault.RECV_ERROR
    if isinstance(exc, httpx.TooManyRedirects):
        return TransportFault.TOO_MANY_REDIRECTS
    return TransportFault.GENERIC


def strerror(error: int) -> str:
    """
    Describe a status or fault code.

    Codes below 90 are network faults; everything else belongs to the
    transport's own taxonomy.
    """
    if 0 < error < FAULT_RANGE_END:
        try:
            return _FAULT_MESSAGES[TransportFault(error)]
        except ValueError:
            return "Unknown error"
    try:
        return _STATUS_MESSAGES[TransportStatus(error)]
    except ValueError:
        return "Unknown error"
