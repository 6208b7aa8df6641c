import pytest

from utils.errors import ExpiredFlow, SelectionNotFound
from utils.resolver import build_candidates, resolve


def candidates():
    return build_candidates(
        [{"title": "Lost", "n": 1}, {"title": "Lost Girl", "n": 2}, {"title": "Lost", "n": 3}],
        lambda s: s["title"],
        n=lambda s: s["n"],
    )


def test_build_candidates_numbers_from_one():
    cs = candidates()
    assert [c["id"] for c in cs] == [1, 2, 3]
    assert cs[1] == {"id": 2, "keyboard_value": "Lost Girl", "n": 2}


def test_exact_match():
    assert resolve(candidates(), "Lost Girl")["n"] == 2


def test_duplicate_values_resolve_to_first():
    assert resolve(candidates(), "Lost")["n"] == 1


def test_match_is_case_sensitive():
    with pytest.raises(SelectionNotFound):
        resolve(candidates(), "lost")


def test_no_partial_match():
    with pytest.raises(SelectionNotFound, match="could not find the series Los"):
        resolve(candidates(), "Los", "series")


def test_missing_list_is_expired():
    with pytest.raises(ExpiredFlow):
        resolve(None, "Lost")


def test_empty_list_is_not_found():
    with pytest.raises(SelectionNotFound):
        resolve([], "Lost")
