"""
Name: User Search Semantics Tests

Responsibilities:
  - Validate "no intent => empty" filter semantics
  - Validate case-sensitive substring matching (AND)
"""

import pytest

from identity_api.domain.user_search import SearchFilter, matches_criteria

pytestmark = pytest.mark.unit


def test_no_params_has_no_intent():
    assert SearchFilter.from_params({}).has_search_intent is False


def test_unknown_params_are_ignored():
    filters = SearchFilter.from_params({"role": "ADMIN", "page": "2"})

    assert filters.provided == {}
    assert filters.has_search_intent is False


@pytest.mark.parametrize("value", ["", None])
def test_empty_or_null_field_has_no_intent(value):
    filters = SearchFilter.from_params({"username": "ali", "email": value})

    assert filters.has_search_intent is False


def test_camel_case_full_name_maps_to_attribute():
    filters = SearchFilter.from_params({"fullName": "Lid"})

    assert filters.criteria() == {"full_name": "Lid"}


def test_substring_match(alice):
    assert matches_criteria(alice, {"username": "ali"}) is True
    assert matches_criteria(alice, {"email": "@x."}) is True


def test_match_is_case_sensitive(alice):
    assert matches_criteria(alice, {"username": "ALI"}) is False


def test_all_criteria_must_match(alice):
    assert matches_criteria(alice, {"username": "ali", "email": "b@"}) is False


def test_missing_full_name_never_matches(user_factory):
    user = user_factory(email="n@x.com", username="nameless")

    assert matches_criteria(user, {"full_name": "a"}) is False
