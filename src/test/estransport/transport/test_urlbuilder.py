import pytest

from src.estransport.transport.urlbuilder import build_url
from src.estransport.transport.errors import UrlError


@pytest.mark.parametrize(
    "index, type_, action, expected",
    [
        ("foods", None, None, "foods"),
        ("foods", "", "", "foods"),
        ("foods", None, "_refresh", "foods/_refresh"),
        ("foods", "", "_search", "foods/_search"),
        ("foods", "food", None, "foods/food"),
        ("foods", "food", "_search", "foods/food/_search"),
        ("foods", "food", "1", "foods/food/1"),
    ],
)
def test_build_url_joins_segments(index, type_, action, expected):
    assert build_url(index, type_, action) == expected


@pytest.mark.parametrize("index", [None, ""])
def test_build_url_requires_index(index):
    with pytest.raises(UrlError):
        build_url(index, "food", "_search")


def test_build_url_does_not_encode():
    assert build_url("my index", "a/b", "_search") == "my index/a/b/_search"
