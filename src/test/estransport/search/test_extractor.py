import json

import pytest

from src.estransport.search.extractor import NOT_AN_OBJECT, FieldLimits, ResponseExtractor
from src.estransport.search.schemas.result_schemas import (
    CreateIndexResult,
    DeleteIndexResult,
    ErrorResult,
    IndexDocumentResult,
    RefreshResult,
    ResultKind,
    SearchResult,
)
from src.estransport.transport.errors import ParseError


SEARCH_BODY = (
    '{"took":5,"timed_out":false,"_shards":{"total":1,"successful":1,"failed":0},'
    '"hits":{"total":1,"max_score":1.0,"hits":[{"_index":"foods","_type":"food","_id":"1",'
    '"_score":1.0,"_source":{"name":"soup"}}]}}'
)


@pytest.fixture
def extractor():
    return ResponseExtractor()


def search_body(hits, **extra):
    body = {"took": 3, "hits": {"total": len(hits), "max_score": 2.5, "hits": hits}}
    body.update(extra)
    return json.dumps(body)


def test_search(extractor):
    result = extractor.extract(ResultKind.SEARCH, SEARCH_BODY)

    assert isinstance(result, SearchResult)
    assert result.took == 5
    assert result.timed_out is False
    assert (result.shards.total, result.shards.successful, result.shards.failed) == (1, 1, 0)
    assert result.hits.total == 1
    assert result.hits.max_score == 1.0
    assert len(result.hits.hits) == 1
    hit = result.hits.hits[0]
    assert (hit.index, hit.type, hit.id, hit.score) == ("foods", "food", "1", 1.0)
    assert hit.source == '{"name":"soup"}'


def test_extract_is_idempotent(extractor):
    first = extractor.extract(ResultKind.SEARCH, SEARCH_BODY)
    second = extractor.extract(ResultKind.SEARCH, SEARCH_BODY)
    assert first == second


@pytest.mark.parametrize("kind", [k for k in ResultKind if k not in (ResultKind.NONE, ResultKind.ERROR)])
def test_error_field_wins_for_every_kind(extractor, kind):
    result = extractor.extract(kind, '{"error":"X","status":404,"acknowledged":true,"took":1}')
    assert isinstance(result, ErrorResult)
    assert result.error == "X"
    assert result.status == 404


def test_error_without_status(extractor):
    result = extractor.extract(ResultKind.REFRESH, '{"error":"boom"}')
    assert result == ErrorResult(error="boom", status=0)


def test_error_object_is_serialized(extractor):
    body = '{"error":{"type":"index_not_found_exception","index":"foods"},"status":404}'
    result = extractor.extract(ResultKind.DELETE_INDEX, body)
    assert result.error == '{"type":"index_not_found_exception","index":"foods"}'
    assert result.status == 404


def test_null_error_is_not_an_error(extractor):
    result = extractor.extract(ResultKind.CREATE_INDEX, '{"error":null,"acknowledged":true}')
    assert result == CreateIndexResult(acknowledged=True)


def test_hits_are_bounded():
    extractor = ResponseExtractor(FieldLimits(max_num_hits=3))
    hits = [{"_id": str(i), "_source": {"n": i}} for i in range(10)]

    result = extractor.extract(ResultKind.SEARCH, search_body(hits))

    assert [h.id for h in result.hits.hits] == ["0", "1", "2"]
    assert result.hits.total == 10


def test_source_variants(extractor):
    hits = [
        {"_id": "obj", "_source": {"b": [1, 2.50, None], "a": {"c": True}}},
        {"_id": "str", "_source": "plain text"},
        {"_id": "missing"},
        {"_id": "array", "_source": [1, 2]},
    ]
    result = extractor.extract(ResultKind.SEARCH, search_body(hits))
    sources = [h.source for h in result.hits.hits]

    assert sources == ['{"b":[1,2.5,null],"a":{"c":true}}', "plain text", NOT_AN_OBJECT, NOT_AN_OBJECT]


def test_missing_fields_keep_zero_values(extractor):
    result = extractor.extract(ResultKind.SEARCH, "{}")
    assert result == SearchResult()

    result = extractor.extract(ResultKind.INDEX_DOCUMENT, '{"_id":"1"}')
    assert result == IndexDocumentResult(id="1")


def test_wrongly_typed_fields_are_ignored(extractor):
    body = '{"took":"5","timed_out":"true","_shards":{"total":[1]},"hits":{"hits":{"_id":"x"}}}'
    result = extractor.extract(ResultKind.SEARCH, body)
    assert result == SearchResult()


@pytest.mark.parametrize("value, expected", [("true", True), ("false", False), ('"true"', False), ("1", False)])
def test_boolean_fields_need_json_true(extractor, value, expected):
    result = extractor.extract(ResultKind.CREATE_INDEX, '{"acknowledged":%s}' % value)
    assert result.acknowledged is expected


def test_delete_index(extractor):
    assert extractor.extract(ResultKind.DELETE_INDEX, '{"acknowledged":true}') == DeleteIndexResult(acknowledged=True)


def test_index_document(extractor):
    body = '{"_index":"foods","_type":"food","_id":"1","_version":3,"created":true}'
    result = extractor.extract(ResultKind.INDEX_DOCUMENT, body)
    assert result == IndexDocumentResult(index="foods", type="food", id="1", version=3, created=True)


def test_refresh(extractor):
    result = extractor.extract(ResultKind.REFRESH, '{"_shards":{"total":10,"successful":5,"failed":0}}')
    assert isinstance(result, RefreshResult)
    assert (result.shards.total, result.shards.successful, result.shards.failed) == (10, 5, 0)


def test_hits_total_object(extractor):
    body = '{"hits":{"total":{"value":42,"relation":"eq"},"hits":[]}}'
    assert extractor.extract(ResultKind.SEARCH, body).hits.total == 42


def test_truncation_is_reported():
    extractor = ResponseExtractor(FieldLimits(index_len=4, source_len=8, error_len=3))
    hits = [{"_index": "foods-2024", "_id": "1", "_source": {"name": "soup"}}]

    hit = extractor.extract(ResultKind.SEARCH, search_body(hits)).hits.hits[0]

    assert hit.index == "food"
    assert hit.source == '{"name":'
    assert hit.truncated == ["source", "index"]

    error = extractor.extract(ResultKind.REFRESH, '{"error":"boom"}')
    assert error.error == "boo"
    assert error.truncated == ["error"]


def test_malformed_body(extractor):
    with pytest.raises(ParseError):
        extractor.extract(ResultKind.SEARCH, '{"took":')


def test_body_as_bytes(extractor):
    assert extractor.extract(ResultKind.DELETE_INDEX, b'{"acknowledged":true}').acknowledged is True


HUGE_INTEGER = "9" * 5000


@pytest.mark.parametrize(
    "kind, body, field",
    [
        (ResultKind.SEARCH, '{"took":1e400,"hits":{"total":5}}', "took"),
        (ResultKind.REFRESH, '{"_shards":{"total":-1e400,"successful":2}}', "shards"),
        (ResultKind.INDEX_DOCUMENT, '{"_id":"1","_version":%s}' % HUGE_INTEGER, "version"),
    ],
)
def test_out_of_range_numbers_fall_back_to_zero(extractor, kind, body, field):
    result = extractor.extract(kind, body)

    if field == "took":
        assert result.took == 0
        assert result.hits.total == 5
    elif field == "shards":
        assert result.shards.total == 0
        assert result.shards.successful == 2
    else:
        assert result.version == 0
        assert result.id == "1"


def test_out_of_range_error_status(extractor):
    result = extractor.extract(ResultKind.CREATE_INDEX, '{"error":"x","status":1e400}')
    assert result == ErrorResult(error="x", status=0)
