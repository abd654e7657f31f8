# tests/unit/test_selection_properties.py
"""Property tests for selection parsing (skipped when Hypothesis is absent)."""

from __future__ import annotations

import string

import pytest

hypothesis = pytest.importorskip("hypothesis")
from hypothesis import given, strategies as st  # noqa: E402

from modeltree.selection import resolve_selection  # noqa: E402

CATALOG = ("Flux", "Hunyuan", "Illustrious")

# two or more letters so a name never collides with a letter index
_names = st.text(alphabet=string.ascii_letters, min_size=2, max_size=8)
_catalogs = st.lists(_names, min_size=1, max_size=26, unique_by=str.lower)


def _disallowed(s: str) -> bool:
    return any(not c.isspace() and not (c in string.ascii_letters or c == ",") for c in s)


@given(catalog=_catalogs)
def test_all_returns_catalog_in_order(catalog):
    assert resolve_selection("all", catalog).selected == list(catalog)


@given(catalog=_catalogs, data=st.data())
def test_letter_selects_entry_at_index(catalog, data):
    idx = data.draw(st.integers(min_value=0, max_value=len(catalog) - 1))
    letter = chr(ord("a") + idx)
    if data.draw(st.booleans()):
        letter = letter.upper()
    assert resolve_selection(letter, catalog).selected == [catalog[idx]]


@given(catalog=_catalogs, data=st.data())
def test_same_entry_twice_is_kept_once(catalog, data):
    idx = data.draw(st.integers(min_value=0, max_value=len(catalog) - 1))
    forms = [chr(ord("a") + idx), chr(ord("A") + idx), catalog[idx].lower(), catalog[idx].upper()]
    first = data.draw(st.sampled_from(forms))
    second = data.draw(st.sampled_from(forms))
    res = resolve_selection(f"{first},{second}", catalog)
    assert res.selected == [catalog[idx]]
    assert len(res.duplicates) == 1


@given(token=st.text(alphabet=string.ascii_letters, min_size=2, max_size=8))
def test_unknown_token_is_invalid_but_not_fatal(token):
    if token.lower() in {c.lower() for c in CATALOG} or token == "all":
        return
    res = resolve_selection(f"a,{token}", CATALOG)
    assert res.ok
    assert res.selected == ["Flux"]
    assert res.invalid == [token]


@given(raw=st.text(min_size=1).filter(_disallowed))
def test_disallowed_characters_fail_wholesale(raw):
    res = resolve_selection(raw, CATALOG)
    assert not res.ok
    assert res.selected == []
