"""
Snapshot migration tests.
Tests repair of corrupt entries and upgrade of the legacy lastRating schema.
"""
from flashdeck.history.migration import (
    LEGACY_REVIEW_LIMIT,
    normalize_card_map,
    normalize_card_state,
    normalize_queue,
    sanitize_since_fresh,
)
from flashdeck.models import Rating


class TestCurrentSchema:

    def test_valid_reviews_kept_in_order(self):
        state = normalize_card_state({"reviews": ["hard", "easy", "trivial", "normal"]})
        assert state.reviews == [Rating.HARD, Rating.EASY, Rating.TRIVIAL, Rating.NORMAL]

    def test_corrupt_entries_dropped(self):
        state = normalize_card_state({"reviews": ["easy", 3, "MEDIUM", "bogus", None, "Hard", {}]})
        assert state.reviews == [Rating.EASY, Rating.NORMAL, Rating.HARD]

    def test_padded_ratings_dropped(self):
        state = normalize_card_state({"reviews": [" easy ", "hard", "normal\n"]})
        assert state.reviews == [Rating.HARD]

    def test_reviews_take_precedence_over_legacy_fields(self):
        state = normalize_card_state({"reviews": [], "lastRating": "hard", "reviewCount": 4})
        assert state.reviews == []


class TestLegacySchema:

    def test_last_rating_repeated_review_count_times(self):
        state = normalize_card_state({"lastRating": "hard", "reviewCount": 3})
        assert state.to_dict() == {"reviews": ["hard", "hard", "hard"]}

    def test_review_count_clamped(self):
        state = normalize_card_state({"lastRating": "easy", "reviewCount": 10_000})
        assert len(state.reviews) == LEGACY_REVIEW_LIMIT == 100

    def test_missing_or_invalid_count_means_one_review(self):
        for count in (None, "many", 0, -4, float("nan")):
            state = normalize_card_state({"lastRating": "easy", "reviewCount": count})
            assert state.reviews == [Rating.EASY]

    def test_fractional_count_truncated(self):
        state = normalize_card_state({"lastRating": "normal", "reviewCount": 2.9})
        assert state.reviews == [Rating.NORMAL, Rating.NORMAL]

    def test_alias_resolved(self):
        state = normalize_card_state({"lastRating": "medium", "reviewCount": 2})
        assert state.reviews == [Rating.NORMAL, Rating.NORMAL]

    def test_invalid_last_rating_is_never_reviewed(self):
        assert normalize_card_state({"lastRating": "meh", "reviewCount": 3}).reviews == []
        assert normalize_card_state({"lastRating": 2, "reviewCount": 3}).reviews == []
        assert normalize_card_state({"reviewCount": 3}).reviews == []


class TestMalformedEntries:

    def test_non_object_state_is_default(self):
        for raw in (None, "easy", 7, ["easy"]):
            assert normalize_card_state(raw).is_fresh

    def test_non_object_card_map_is_empty(self):
        assert normalize_card_map(None) == {}
        assert normalize_card_map(["easy"]) == {}

    def test_card_map_keys_stringified(self):
        cards = normalize_card_map({"1": {"reviews": ["easy"]}, "2": "junk"})
        assert set(cards) == {"1", "2"}
        assert cards["1"].reviews == [Rating.EASY]
        assert cards["2"].is_fresh


class TestQueueAndCounters:

    def test_queue_entries_coerced_to_int(self):
        assert normalize_queue([1, "2", "x", None, 3.9, True, {}]) == [1, 2, 3]

    def test_non_list_queue_is_empty(self):
        assert normalize_queue({"1": 2}) == []
        assert normalize_queue(None) == []

    def test_since_fresh_sanitized(self):
        assert sanitize_since_fresh(4) == 4
        assert sanitize_since_fresh(0) == 0
        assert sanitize_since_fresh(-1) == 0
        assert sanitize_since_fresh("3") == 0
        assert sanitize_since_fresh(True) == 0
        assert sanitize_since_fresh(2.5) == 0
