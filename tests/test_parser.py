"""Tests for parse_one / parse_all and the matcher registry."""

import time

import pytest

from gameshelf.core.game_protocol import Game
from gameshelf.core.parser import BUILTIN_GAMES, DEFAULT_REGISTRY, build_registry, parse_all, parse_one

WORDLE = """Wordle 1,234 3/6
⬛🟩🟨⬛⬛
⬛🟩🟩🟨⬛
🟩🟩🟩🟩🟩"""

CONNECTIONS = """Connections Puzzle #567
🟨🟨🟨🟨
🟩🟩🟩🟩
🟦🟦🟦🟦
🟪🟪🟪🟪"""

STRANDS = """Strands #123
“Play ball”
🔵🔵🟡💡
🔵🔵"""

MINI = "I solved the 1/17/2026 New York Times Mini Crossword in 1:23!"


class TestEndToEnd:
    """The reference examples for each game."""

    def test_wordle(self):
        result = parse_one("Wordle 1,234 3/6")
        assert (result.game_id, result.puzzle_number, result.raw_score, result.won, result.numeric_score) == \
            ("wordle", 1234, "3/6", True, 20)

    def test_wordle_loss(self):
        result = parse_one("Wordle 1,234 X/6")
        assert (result.game_id, result.puzzle_number, result.raw_score, result.won, result.numeric_score) == \
            ("wordle", 1234, "X/6", False, 0)

    def test_connections(self):
        result = parse_one("Connections \nPuzzle #567\n🟨🟨🟨🟨\n🟩🟩🟩🟩\n🟦🟦🟦🟦\n🟪🟪🟪🟪")
        assert result.game_id == "connections"
        assert result.puzzle_number == 567
        assert result.won is True
        assert result.meta["perfect"] is True
        assert result.meta["mistakes"] == 0

    def test_strands(self):
        result = parse_one("Strands #123\n🟡🔵🔵\n🔵🔵🔵")
        assert result.game_id == "strands"
        assert result.puzzle_number == 123
        assert result.meta["hints"] == 0
        assert result.meta["perfect"] is True
        assert result.numeric_score == 30

    def test_mini(self):
        result = parse_one(MINI)
        assert result.game_id == "mini"
        assert result.meta["seconds"] == 83
        assert result.numeric_score == 27

    def test_random_text(self):
        assert parse_one("This is just random text") is None


@pytest.mark.parametrize("value", [
    None, 12345, 3.14, [], {}, object(), b"Wordle 1,234 3/6",
    "", "   ", "Hello world!", "🟨🟨🟨🟨", "3/6", "#123", "💡💡💡",
    "x" * 10000, "a" * 5000 + "\n" * 5000, "wordle " * 2000, "connections puzzle " * 2000,
    "Mini " + "9" * 10000, "<script>alert('xss')</script>",
    "\x00\x01\x02\x1b[31m", "\ud800",
])
def test_never_raises(value):
    parse_one(value)
    assert isinstance(parse_all(value), list)


@pytest.mark.parametrize("value", [None, 12345, "", "   ", "This is just random text"])
def test_no_match_values(value):
    assert parse_one(value) is None
    assert parse_all(value) == []


def test_first_match_wins_and_parse_all_keeps_source_order():
    text = "My daily puzzles:\n" + WORDLE + "\n" + CONNECTIONS
    assert parse_one(text).game_id == "wordle"
    assert [r.game_id for r in parse_all(text)] == ["wordle", "connections"]


def test_parse_all_uses_source_order_not_registry_order():
    text = MINI + "\n\n" + STRANDS + "\n\n" + CONNECTIONS + "\n\n" + WORDLE
    results = parse_all(text)
    assert [r.game_id for r in results] == ["mini", "strands", "connections", "wordle"]
    # Registry order still decides parse_one
    assert parse_one(text).game_id == "wordle"


def test_parse_all_does_not_double_count():
    assert len(parse_all(WORDLE)) == 1
    assert len(parse_all(CONNECTIONS)) == 1
    assert len(parse_all(STRANDS + "\n" + STRANDS)) == 2


def test_parse_all_stacked_shares():
    text = "\n\n".join([WORDLE, CONNECTIONS, STRANDS, MINI])
    results = parse_all(text)
    assert [(r.game_id, r.puzzle_number) for r in results][:3] == [
        ("wordle", 1234), ("connections", 567), ("strands", 123),
    ]
    assert results[3].game_id == "mini"
    strands = results[2]
    assert strands.meta["hints"] == 1
    assert strands.numeric_score == 16


def test_markup_is_inert():
    result = parse_one("Wordle 1,234 3/6<script>alert(\"xss\")</script>")
    assert result.game_id == "wordle"
    assert result.numeric_score == 20


@pytest.mark.parametrize("text", [
    "Wordle 1,234 3/6 🎉🎊✨",
    "Wordle 1,234 3/6 你好",
    "Wordle 1,234 3/6\u200b",
    "Wordle\u00a01,234\u00a03/6",
    "Wordle 1,234 3/6\r\n\r\n⬛⬛🟨⬛⬛\r\n⬛🟩🟩🟨⬛\r\n🟩🟩🟩🟩🟩",
    "Wordle 1,234 3/6\n" + "⬛" * 10000,
])
def test_noisy_wordle(text):
    assert parse_one(text).game_id == "wordle"


def test_deterministic():
    for text in (WORDLE, CONNECTIONS, STRANDS, MINI):
        assert parse_one(text) == parse_one(text)
        assert parse_all(text) == parse_all(text)


def test_hundred_parses_are_fast():
    texts = ["Wordle 1,234 3/6", CONNECTIONS, "Strands #456\n🟡🔵🔵"]
    start = time.perf_counter()
    parsed = [parse_one(texts[i % len(texts)]) for i in range(100)]
    assert time.perf_counter() - start < 1.0
    assert all(p is not None for p in parsed)


@pytest.mark.parametrize("text", [
    "Strands 1 " * 5000 + "\n" + "🔵\n" * 5000,
    "Wordle 1 3/6 " * 4000 + "\n" * 4000 + "end",
    "Connections Puzzle #1 " * 2500 + "\n" + "🟨🟨🟨🟨\n" * 2500,
    "Mini Crossword 1:00 " * 2500 + "1/17/2026",
    ("Wordle 1 3/6\n" + "\n" * 20) * 2000,
])
def test_parse_all_stays_fast_on_50kb_of_repeated_headers(text):
    assert len(text) >= 40000
    start = time.perf_counter()
    results = parse_all(text)
    assert time.perf_counter() - start < 1.0
    assert results


@pytest.mark.parametrize("text", [
    "Wordle " + "9" * 5000 + " 3/6",
    "Strands #" + "9" * 5000,
    "Connections Puzzle #" + "1,000" * 2000,
])
def test_runaway_puzzle_numbers_are_no_match(text, caplog):
    assert parse_all(text) == []
    assert parse_one(text) is None
    assert "matcher raised" not in caplog.text


def test_result_is_immutable_value():
    result = parse_one(CONNECTIONS)
    with pytest.raises(AttributeError):
        result.won = False
    with pytest.raises(TypeError):
        result.meta["mistakes"] = 3
    assert result.to_dict() == {
        "gameId": "connections",
        "puzzleNumber": 567,
        "rawScore": "Perfect!",
        "won": True,
        "numericScore": 35,
        "meta": {"mistakes": 0, "perfect": True, "categories_solved": 4},
    }


def test_score_is_a_function_of_raw_score_and_meta():
    for text in (WORDLE, CONNECTIONS, STRANDS, MINI, "Wordle 1 X/6", "Connections Puzzle #1"):
        result = parse_one(text)
        game = BUILTIN_GAMES[result.game_id]
        assert game.score(result.raw_score, result.meta) == result.numeric_score


class TestRegistry:

    def test_default_order(self):
        assert [g.game_id for g in DEFAULT_REGISTRY] == ["wordle", "connections", "strands", "mini"]
        assert all(isinstance(g, Game) for g in DEFAULT_REGISTRY)

    def test_subset_and_order(self):
        registry = build_registry(["Connections ", "wordle"])
        assert [g.game_id for g in registry] == ["connections", "wordle"]
        text = "My daily puzzles:\n" + WORDLE + "\n" + CONNECTIONS
        assert parse_one(text, registry).game_id == "connections"

    def test_disabled_game_is_not_matched(self):
        registry = build_registry(["connections"])
        assert parse_one(WORDLE, registry) is None
        assert [r.game_id for r in parse_all(WORDLE + "\n" + CONNECTIONS, registry)] == ["connections"]

    def test_unknown_game(self):
        with pytest.raises(KeyError):
            build_registry(["wordle", "quordle"])

    def test_registry_is_immutable(self):
        assert isinstance(DEFAULT_REGISTRY, tuple)

    def test_failing_matcher_is_contained(self, caplog):
        class Broken:
            game_id = "broken"

            def try_match(self, text):
                raise RuntimeError("boom")

            def find_all(self, text):
                raise RuntimeError("boom")

        registry = (Broken(),) + DEFAULT_REGISTRY
        assert parse_one("Wordle 1,234 3/6", registry).game_id == "wordle"
        assert [r.game_id for r in parse_all("Wordle 1,234 3/6", registry)] == ["wordle"]
        assert "broken matcher raised" in caplog.text
