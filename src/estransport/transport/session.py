import logging
import secrets
import string
import threading
from contextlib import contextmanager
from typing import Any, Dict, Optional, Union

from src.estransport.connectors.http import HttpConnector
from src.estransport.credentials.localsettings.transportconfig import TransportConfig
from src.estransport.search.extractor import FieldLimits, ResponseExtractor
from src.estransport.search.schemas.result_schemas import (
    ErrorResult,
    NoResult,
    Result,
    ResultKind,
)
from src.estransport.transport import invoker
from src.estransport.transport.buffer import ResponseBuffer
from src.estransport.transport.errors import (
    InputError,
    ParseError,
    SessionBusyError,
    TransportError,
    TransportStatus,
    strerror,
)
from src.estransport.transport.urlbuilder import build_url

logger = logging.getLogger(__name__)

SESSION_ID_CHARSET = "_" + string.ascii_letters


def generate_session_id(length: int) -> str:
    """Random identifier used only to correlate log lines."""
    return "".join(secrets.choice(SESSION_ID_CHARSET) for _ in range(length))


class TransportSession:
    """
    Client handle for one search cluster.

    Every operation returns 0 on success or a status code (see
    `strerror`) and leaves its parsed outcome in `result`. Only the
    variant matching the last call is valid, and only when it returned 0
    or TransportStatus.ELASTIC.

    A session is meant to be driven by one caller at a time. Overlapping
    calls from several threads are refused with TransportStatus.BUSY.
    """

    def __init__(
        self,
        config: Union[TransportConfig, Dict[str, Any]],
        connector: Optional[HttpConnector] = None,
    ):
        if not isinstance(config, TransportConfig):
            config = TransportConfig(**config)

        self.config = config
        self.id = generate_session_id(config.session_id_len)
        self.hosts = list(config.hosts)
        self.timeout = config.timeout
        self.response = ResponseBuffer(config.response_buffer_len, flush=config.flush_response)
        self.response_offset = 0
        self.result: Result = NoResult()

        self.connector = connector or HttpConnector(timeout=config.timeout)
        self.extractor = ResponseExtractor(FieldLimits.from_config(config))

        self._lock = threading.Lock()
        self._destroyed = False

        logger.info(
            "TransportSession created | id=%s hosts=%s timeout=%ss flush_response=%s",
            self.id,
            ",".join(h.base_url for h in self.hosts),
            self.timeout,
            self.flush_response,
        )

    @classmethod
    def create(
        cls,
        config: Union[TransportConfig, Dict[str, Any]],
        connector: Optional[HttpConnector] = None,
    ) -> "TransportSession":
        return cls(config, connector=connector)

    @property
    def flush_response(self) -> bool:
        return self.response.flush

    @flush_response.setter
    def flush_response(self, value: bool) -> None:
        self.response.flush = value

    @property
    def last_response(self) -> str:
        """Text of the response buffer, all responses when appending."""
        return self.response.text

    def reset_response(self) -> None:
        self.response.reset()
        self.response_offset = 0

    @contextmanager
    def _exclusive(self):
        if not self._lock.acquire(blocking=False):
            raise SessionBusyError(f"session {self.id} is already running a call")
        try:
            if self._destroyed:
                raise InputError(f"session {self.id} has been destroyed")
            yield
        finally:
            self._lock.release()

    def _operation(
        self,
        kind: ResultKind,
        method: str,
        body: Optional[str],
        index: Optional[str],
        type_: Optional[str] = None,
        action: Optional[str] = None,
    ) -> int:
        try:
            with self._exclusive():
                self.result = NoResult()
                path = build_url(index, type_, action)

                ret = invoker.call(self, path, method, body)
                if ret != TransportStatus.OK:
                    return ret

                try:
                    result = self.extractor.extract(kind, self.response.getvalue(self.response_offset))
                except TransportError:
                    raise
                except Exception as e:
                    raise ParseError(f"could not extract {kind.value} response: {e!r}") from e
                self.result = result
        except SessionBusyError as e:
            logger.error("%s", e)
            return e.status
        except TransportError as e:
            logger.error("[%s] %s %s failed: %s", self.id, kind.value, index, e)
            return e.status

        if isinstance(result, ErrorResult):
            return TransportStatus.ELASTIC
        return TransportStatus.OK

    def _raw(self, method: str, path: str, body: Optional[str] = None) -> int:
        try:
            with self._exclusive():
                self.result = NoResult()
                return invoker.call(self, path, method, body)
        except TransportError as e:
            logger.error("[%s] %s %s failed: %s", self.id, method, path, e)
            return e.status

    # ---------------- Operations ----------------

    def search(self, index: str, type_: Optional[str], query: Optional[str]) -> int:
        """POST index[/type]/_search with a JSON query body."""
        return self._operation(ResultKind.SEARCH, "POST", query, index, type_, "_search")

    def create_index(self, index: str, settings: Optional[str] = None) -> int:
        """PUT index with optional settings/mappings JSON."""
        return self._operation(ResultKind.CREATE_INDEX, "PUT", settings, index)

    def delete_index(self, index: str) -> int:
        return self._operation(ResultKind.DELETE_INDEX, "DELETE", None, index)

    def index_document(self, index: str, type_: str, id: str, document: str) -> int:
        """PUT index/type/id storing one JSON document."""
        return self._operation(ResultKind.INDEX_DOCUMENT, "PUT", document, index, type_, id)

    def refresh(self, index: str) -> int:
        return self._operation(ResultKind.REFRESH, "POST", None, index, None, "_refresh")

    def raw_get(self, path: str) -> int:
        return self._raw("GET", path)

    def raw_post(self, path: str, body: Optional[str] = None) -> int:
        return self._raw("POST", path, body)

    def raw_put(self, path: str, body: Optional[str] = None) -> int:
        return self._raw("PUT", path, body)

    def raw_delete(self, path: str, body: Optional[str] = None) -> int:
        return self._raw("DELETE", path, body)

    @staticmethod
    def strerror(error: int) -> str:
        return strerror(error)

    def destroy(self) -> None:
        """Release the HTTP client and drop buffered state."""
        with self._lock:
            if self._destroyed:
                return
            self.connector.close()
            self.response.reset()
            self.response_offset = 0
            self.result = NoResult()
            self._destroyed = True
        logger.info("TransportSession destroyed | id=%s", self.id)
