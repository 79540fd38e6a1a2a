from enum import Enum
from typing import Annotated, List, Literal, Union

from pydantic import BaseModel, Field


class ResultKind(str, Enum):
    """Which result variant a session currently holds."""

    NONE = "none"
    ERROR = "error"
    SEARCH = "search"
    CREATE_INDEX = "create_index"
    DELETE_INDEX = "delete_index"
    INDEX_DOCUMENT = "index_document"
    REFRESH = "refresh"


class Shards(BaseModel):
    """Shard counters reported by search and refresh."""
    total: int = 0
    successful: int = 0
    failed: int = 0


class NoResult(BaseModel):
    """Nothing valid to read for the last call."""
    kind: Literal[ResultKind.NONE] = ResultKind.NONE


class ErrorResult(BaseModel):
    """Error reported by the search service inside a response body."""
    kind: Literal[ResultKind.ERROR] = ResultKind.ERROR
    error: str = Field(default="", description="Service error message")
    status: int = Field(default=0, description="Service or HTTP status")
    truncated: List[str] = Field(default_factory=list, description="Fields clipped to capacity")


class SearchHit(BaseModel):
    """Individual search result."""
    index: str = ""
    type: str = ""
    id: str = ""
    score: float = 0.0
    source: str = Field(default="", description="Compact JSON text of _source, or the raw string")
    truncated: List[str] = Field(default_factory=list, description="Fields clipped to capacity")


class HitsSummary(BaseModel):
    total: int = 0
    max_score: float = 0.0
    hits: List[SearchHit] = Field(default_factory=list)


class SearchResult(BaseModel):
    """Search response model."""
    kind: Literal[ResultKind.SEARCH] = ResultKind.SEARCH
    took: int = Field(default=0, description="Search time in milliseconds")
    timed_out: bool = False
    shards: Shards = Field(default_factory=Shards)
    hits: HitsSummary = Field(default_factory=HitsSummary)


class CreateIndexResult(BaseModel):
    kind: Literal[ResultKind.CREATE_INDEX] = ResultKind.CREATE_INDEX
    acknowledged: bool = False


class DeleteIndexResult(BaseModel):
    kind: Literal[ResultKind.DELETE_INDEX] = ResultKind.DELETE_INDEX
    acknowledged: bool = False


class IndexDocumentResult(BaseModel):
    """Outcome of storing one document."""
    kind: Literal[ResultKind.INDEX_DOCUMENT] = ResultKind.INDEX_DOCUMENT
    index: str = ""
    type: str = ""
    id: str = ""
    version: int = 0
    created: bool = False
    truncated: List[str] = Field(default_factory=list, description="Fields clipped to capacity")


class RefreshResult(BaseModel):
    kind: Literal[ResultKind.REFRESH] = ResultKind.REFRESH
    shards: Shards = Field(default_factory=Shards)


Result = Annotated[
    Union[
        NoResult,
        ErrorResult,
        SearchResult,
        CreateIndexResult,
        DeleteIndexResult,
        IndexDocumentResult,
        RefreshResult,
    ],
    Field(discriminator="kind"),
]
