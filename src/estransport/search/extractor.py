import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Union

from src.estransport.search.schemas.result_schemas import (
    CreateIndexResult,
    DeleteIndexResult,
    ErrorResult,
    HitsSummary,
    IndexDocumentResult,
    RefreshResult,
    Result,
    ResultKind,
    SearchHit,
    SearchResult,
    Shards,
)
from src.estransport.search.serializer import (
    JsonNumber,
    TextSink,
    parse,
    serialize_value,
)
from src.estransport.transport.errors import ParseError, SerializationOverflowError

logger = logging.getLogger(__name__)

NOT_AN_OBJECT = "Not an object!"

# JSON paths read from every response kind
ERROR_PATH = ("error",)
STATUS_PATH = ("status",)

TOOK_PATH = ("took",)
TIMED_OUT_PATH = ("timed_out",)
SHARDS_TOTAL_PATH = ("_shards", "total")
SHARDS_SUCCESSFUL_PATH = ("_shards", "successful")
SHARDS_FAILED_PATH = ("_shards", "failed")
HITS_TOTAL_PATH = ("hits", "total")
HITS_MAX_SCORE_PATH = ("hits", "max_score")
HITS_HITS_PATH = ("hits", "hits")
ACKNOWLEDGED_PATH = ("acknowledged",)
CREATED_PATH = ("created",)
VERSION_PATH = ("_version",)

# paths relative to a document or hit
INDEX_PATH = ("_index",)
TYPE_PATH = ("_type",)
ID_PATH = ("_id",)
SCORE_PATH = ("_score",)
SOURCE_PATH = ("_source",)


@dataclass
class FieldLimits:
    """Capacities of the fixed width fields in a result."""

    max_num_hits: int = 100
    error_len: int = 256
    index_len: int = 32
    type_len: int = 32
    id_len: int = 64
    source_len: int = 8192

    @classmethod
    def from_config(cls, config) -> "FieldLimits":
        return cls(
            max_num_hits=config.max_num_hits,
            error_len=config.error_len,
            index_len=config.index_len,
            type_len=config.type_len,
            id_len=config.id_len,
            source_len=config.source_len,
        )


def _lookup(node: Any, path: Sequence[str]) -> Any:
    for key in path:
        if not isinstance(node, dict) or key not in node:
            return None
        node = node[key]
    return node


def _is_number(value: Any) -> bool:
    return isinstance(value, JsonNumber) or (
        isinstance(value, (int, float)) and not isinstance(value, bool)
    )


def get_string(node: Any, path: Sequence[str]) -> Optional[str]:
    value = _lookup(node, path)
    return value if isinstance(value, str) else None


def get_int(node: Any, path: Sequence[str], default: int = 0) -> int:
    """Numbers that cannot be represented as an int (1e400, huge literals) give default."""
    value = _lookup(node, path)
    if not _is_number(value):
        return default
    try:
        return int(value)
    except (ValueError, OverflowError):
        logger.warning("Ignoring out of range number at %s", "/".join(path))
        return default


def get_float(node: Any, path: Sequence[str], default: float = 0.0) -> float:
    value = _lookup(node, path)
    return float(value) if _is_number(value) else default


def get_true(node: Any, path: Sequence[str]) -> bool:
    """Only a present JSON true counts as true."""
    return _lookup(node, path) is True


class ResponseExtractor:
    """
    Turns a raw response body into the result variant for one operation.

    A top-level "error" field always wins over the operation specific
    fields. Missing fields keep their zero value. Strings longer than
    their field capacity are clipped and the field name is listed in the
    record's `truncated` list.
    """

    def __init__(self, limits: Optional[FieldLimits] = None):
        self.limits = limits or FieldLimits()

    def extract(self, kind: ResultKind, body: Union[str, bytes]) -> Result:
        """
        Raises:
            ParseError: when the body is not JSON or cannot be handled
        """
        node = parse(body)

        error = _lookup(node, ERROR_PATH)
        if error is not None:
            return self._error(node, error)

        if kind == ResultKind.SEARCH:
            return self._search(node)
        if kind == ResultKind.CREATE_INDEX:
            return CreateIndexResult(acknowledged=get_true(node, ACKNOWLEDGED_PATH))
        if kind == ResultKind.DELETE_INDEX:
            return DeleteIndexResult(acknowledged=get_true(node, ACKNOWLEDGED_PATH))
        if kind == ResultKind.INDEX_DOCUMENT:
            return self._index_document(node)
        if kind == ResultKind.REFRESH:
            return RefreshResult(shards=self._shards(node))
        raise ParseError(f"No extraction rules for result kind {kind!r}")

    def _clip(self, value: Optional[str], capacity: int, name: str, truncated: List[str]) -> str:
        if value is None:
            return ""
        if len(value) > capacity:
            logger.warning("Field %s truncated from %s to %s characters", name, len(value), capacity)
            truncated.append(name)
            return value[:capacity]
        return value

    def _render(self, value: Any, capacity: int, name: str, truncated: List[str]) -> str:
        sink = TextSink(capacity)
        try:
            serialize_value(sink, value)
        except SerializationOverflowError:
            logger.warning("Field %s truncated to %s characters", name, capacity)
            truncated.append(name)
        return sink.getvalue()

    def _error(self, node: Any, error: Any) -> ErrorResult:
        truncated: List[str] = []
        if isinstance(error, str):
            message = self._clip(error, self.limits.error_len, "error", truncated)
        else:
            message = self._render(error, self.limits.error_len, "error", truncated)
        result = ErrorResult(
            error=message,
            status=get_int(node, STATUS_PATH),
            truncated=truncated,
        )
        logger.warning("Service error | status=%s error=%s", result.status, result.error)
        return result

    def _shards(self, node: Any) -> Shards:
        return Shards(
            total=get_int(node, SHARDS_TOTAL_PATH),
            successful=get_int(node, SHARDS_SUCCESSFUL_PATH),
            failed=get_int(node, SHARDS_FAILED_PATH),
        )

    def _hit(self, obj: Any) -> SearchHit:
        limits = self.limits
        truncated: List[str] = []

        source = _lookup(obj, SOURCE_PATH)
        if isinstance(source, dict):
            source_text = self._render(source, limits.source_len, "source", truncated)
        elif isinstance(source, str):
            source_text = self._clip(source, limits.source_len, "source", truncated)
        else:
            source_text = NOT_AN_OBJECT

        return SearchHit(
            index=self._clip(get_string(obj, INDEX_PATH), limits.index_len, "index", truncated),
            type=self._clip(get_string(obj, TYPE_PATH), limits.type_len, "type", truncated),
            id=self._clip(get_string(obj, ID_PATH), limits.id_len, "id", truncated),
            score=get_float(obj, SCORE_PATH),
            source=source_text,
            truncated=truncated,
        )

    def _hits_total(self, node: Any) -> int:
        # newer servers report {"value": n, "relation": "eq"}
        if isinstance(_lookup(node, HITS_TOTAL_PATH), dict):
            return get_int(node, HITS_TOTAL_PATH + ("value",))
        return get_int(node, HITS_TOTAL_PATH)

    def _search(self, node: Any) -> SearchResult:
        hits = []
        raw_hits = _lookup(node, HITS_HITS_PATH)
        if isinstance(raw_hits, list):
            if len(raw_hits) > self.limits.max_num_hits:
                logger.info(
                    "Keeping first %s of %s hits", self.limits.max_num_hits, len(raw_hits)
                )
            hits = [self._hit(obj) for obj in raw_hits[: self.limits.max_num_hits]]

        return SearchResult(
            took=get_int(node, TOOK_PATH),
            timed_out=get_true(node, TIMED_OUT_PATH),
            shards=self._shards(node),
            hits=HitsSummary(
                total=self._hits_total(node),
                max_score=get_float(node, HITS_MAX_SCORE_PATH),
                hits=hits,
            ),
        )

    def _index_document(self, node: Any) -> IndexDocumentResult:
        limits = self.limits
        truncated: List[str] = []
        return IndexDocumentResult(
            index=self._clip(get_string(node, INDEX_PATH), limits.index_len, "index", truncated),
            type=self._clip(get_string(node, TYPE_PATH), limits.type_len, "type", truncated),
            id=self._clip(get_string(node, ID_PATH), limits.id_len, "id", truncated),
            version=get_int(node, VERSION_PATH),
            created=get_true(node, CREATED_PATH),
            truncated=truncated,
        )
