"""Tests for the query translator (query.py)."""

from __future__ import annotations

import pytest

from project_finder.errors import InvalidPreferenceError
from project_finder.models import Characteristic, Preference, QueryParams, SortHint
from project_finder.query import split_terms, translate, validate


class TestSplitTerms:
    def test_splits_trims_and_lowercases(self):
        assert split_terms(["Rust, Go ,  TypeScript"]) == ("rust", "go", "typescript")

    def test_drops_empty_tokens(self):
        assert split_terms(["rust,, ,go,"]) == ("rust", "go")

    def test_drops_duplicates_keeping_first(self):
        assert split_terms(["go, rust", "Go"]) == ("go", "rust")

    def test_drops_overlong_terms(self):
        assert split_terms(["x" * 101 + ",rust"]) == ("rust",)

    def test_keeps_term_at_length_limit(self):
        assert split_terms(["y" * 100]) == ("y" * 100,)


class TestTranslate:
    def test_languages_and_topics(self):
        params = translate(Preference.parse(languages="Rust, Go", topics="CLI"))
        assert params.languages == ("rust", "go")
        assert params.topics == ("cli",)
        assert params.primary_language == "rust"
        assert params.sort is None

    def test_actively_maintained_is_recent_sort_not_keyword(self):
        params = translate(Preference(characteristics=("actively-maintained",)))
        assert params.sort is SortHint.RECENT
        assert params.keywords == ()
        assert params.wants(Characteristic.ACTIVELY_MAINTAINED)

    def test_large_community_is_popular_sort(self):
        params = translate(Preference(characteristics=("large-community",)))
        assert params.sort is SortHint.POPULAR

    def test_recent_wins_when_both_sort_hints_present(self):
        params = translate(
            Preference(characteristics=("large-community", "actively-maintained"))
        )
        assert params.sort is SortHint.RECENT

    def test_other_characteristics_become_label_keywords(self):
        params = translate(
            Preference(characteristics=("beginner-friendly", "good-documentation"))
        )
        assert params.keywords == ("Beginner-Friendly", "Good Documentation")

    def test_unknown_characteristic_is_ignored(self):
        params = translate(Preference(characteristics=("shiny", "needs-contributors")))
        assert params.characteristics == frozenset({Characteristic.NEEDS_CONTRIBUTORS})
        assert params.keywords == ("Needs Contributors",)

    def test_text_joins_topics_then_keywords(self):
        params = translate(
            Preference.parse(topics="web", characteristics=["good-first-issues"])
        )
        assert params.text == "web Good First Issues"

    def test_is_pure(self):
        pref = Preference.parse(
            languages="rust", topics="cli", characteristics=["beginner-friendly"]
        )
        assert translate(pref) == translate(pref)


class TestValidate:
    def test_empty_preference_rejected(self):
        with pytest.raises(InvalidPreferenceError, match="at least one programming language"):
            validate(translate(Preference()))

    def test_only_unknown_characteristics_rejected(self):
        with pytest.raises(InvalidPreferenceError):
            validate(translate(Preference(characteristics=("nope",))))

    def test_characteristic_alone_is_enough(self):
        validate(QueryParams(characteristics=frozenset({Characteristic.LARGE_COMMUNITY})))
