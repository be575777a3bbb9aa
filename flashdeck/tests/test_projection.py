"""
Snapshot projection tests.
Tests aggregate counts and the public response payload.
"""
from flashdeck.flashcards.projection import build_projection, compute_meta, is_completed
from flashdeck.models import Card, CardState, Rating, Snapshot


def make_deck(count):
    return [Card(id=i, question=f"Q{i}", answer=f"A{i}") for i in range(1, count + 1)]


def state(*tokens):
    return CardState(reviews=[Rating(token) for token in tokens])


class TestCompleted:

    def test_trivial_completes(self):
        assert is_completed(state("hard", "trivial"))

    def test_five_easy_completes(self):
        assert is_completed(state(*["easy"] * 5))

    def test_four_easy_does_not(self):
        assert not is_completed(state(*["easy"] * 4))

    def test_fresh_card_does_not(self):
        assert not is_completed(state())


class TestMeta:

    def test_counts(self):
        snapshot = Snapshot(
            cards={
                "1": state("trivial"),
                "2": state(*["easy"] * 5),
                "3": state("easy", "easy", "hard", "normal"),
                "4": state(),
            },
            queue=[1, 2, 3, 4, 5],
        )
        assert compute_meta(make_deck(6), snapshot) == {
            "total": 6,
            "remaining": 5,
            "reviewed": 10,
            "seen": 3,
            "completed": 2,
        }

    def test_empty(self):
        assert compute_meta([], Snapshot()) == {
            "total": 0,
            "remaining": 0,
            "reviewed": 0,
            "seen": 0,
            "completed": 0,
        }


class TestProjection:

    def test_card_payload_includes_state(self):
        deck = make_deck(2)
        snapshot = Snapshot(cards={"2": state("hard")}, queue=[2, 1])

        projection = build_projection(deck[1], deck, snapshot)

        assert projection["card"] == {
            "id": 2,
            "question": "Q2",
            "answer": "A2",
            "state": {"reviews": ["hard"]},
        }
        assert projection["meta"]["remaining"] == 2

    def test_unreviewed_card_has_empty_history(self):
        deck = make_deck(1)
        projection = build_projection(deck[0], deck, Snapshot(queue=[1]))
        assert projection["card"]["state"] == {"reviews": []}

    def test_no_card(self):
        projection = build_projection(None, [], Snapshot())
        assert projection["card"] is None

    def test_generated_at_is_utc_iso(self):
        generated_at = build_projection(None, [], Snapshot())["generatedAt"]
        assert generated_at.endswith("Z")
        assert "T" in generated_at

    def test_extra_fields_merged(self):
        projection = build_projection(None, [], Snapshot(), rated={"id": 1})
        assert projection["rated"] == {"id": 1}

    def test_public_state_is_a_copy(self):
        deck = make_deck(1)
        snapshot = Snapshot(cards={"1": state("easy")}, queue=[1])
        projection = build_projection(deck[0], deck, snapshot)
        projection["card"]["state"]["reviews"].append("hard")
        assert snapshot.cards["1"].reviews == [Rating.EASY]
