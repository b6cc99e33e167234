"""Tests for deck file parsing and validation."""

import pytest

from spire_deck_report import AnalyzerConfig, parse_entry, read_deck


class TestParseEntry:
    @pytest.mark.parametrize(
        "line, cost",
        [
            ("Strike:1", 1),
            ("Crush:0", 0),
            ("All For One:6", 6),
            ("  Genetic Algorithm :  2 ", 2),
            ("Biased Cognition:+3", 3),
        ],
    )
    def test_accepts_known_cards_in_range(self, line: str, cost: int) -> None:
        """Known card names with a cost in 0-6 are accepted."""
        assert parse_entry(line, AnalyzerConfig()) == cost

    @pytest.mark.parametrize(
        "line",
        [
            "Strike 1",
            "Strike:1:2",
            "Strike:1:",
            "Strike:one",
            "Strike:1.5",
            "Strike:",
            "Strike:7",
            "Strike:-1",
            "Foo:2",
            ":2",
            "strike:1",
            "Strike:1_0",
        ],
    )
    def test_rejects_malformed_lines(self, line: str) -> None:
        """Missing colons, bad numbers, out-of-range costs and unknown names are rejected."""
        assert parse_entry(line, AnalyzerConfig()) is None

    def test_custom_card_list(self) -> None:
        """The accepted names come from the configuration."""
        config = AnalyzerConfig(valid_cards=frozenset({"Bash"}))
        assert parse_entry("Bash:2", config) == 2
        assert parse_entry("Strike:1", config) is None


class TestReadDeck:
    def test_splits_valid_and_invalid(self, write_deck, config) -> None:
        """Valid costs and rejected raw lines are both returned in file order."""
        path = write_deck(["Strike:1", "Crush:3", "Foo:2", "Strike:9"])

        deck = read_deck(path, config)

        assert deck.ok
        assert deck.energy_costs == [1, 3]
        assert deck.invalid_cards == ["Foo:2", "Strike:9"]

    def test_blank_lines_are_invalid(self, write_deck, config) -> None:
        """Empty and whitespace-only lines have no colon and count as invalid entries."""
        path = write_deck(["Strike:1", "", "   ", "Crush:2"])

        deck = read_deck(path, config)

        assert deck.energy_costs == [1, 2]
        assert deck.invalid_cards == ["", "   "]

    def test_trailing_newline_is_not_an_entry(self, tmp_path, config) -> None:
        """The newline ending the last line does not produce an extra blank entry."""
        path = tmp_path / "deck.txt"
        path.write_text("Strike:1\nCrush:2\n", encoding="utf-8")

        deck = read_deck(str(path), config)

        assert deck.energy_costs == [1, 2]
        assert deck.invalid_cards == []

    def test_keeps_raw_invalid_line(self, write_deck, config) -> None:
        """Invalid entries are stored untrimmed, without the line terminator."""
        path = write_deck(["  Foo : 2  "])

        deck = read_deck(path, config)

        assert deck.invalid_cards == ["  Foo : 2  "]

    def test_handles_crlf_and_bom(self, tmp_path, config) -> None:
        """Windows line endings and a UTF-8 BOM do not break parsing."""
        path = tmp_path / "deck.txt"
        path.write_bytes(b"\xef\xbb\xbfStrike:1\r\nCrush:2\r\n")

        deck = read_deck(str(path), config)

        assert deck.energy_costs == [1, 2]
        assert deck.invalid_cards == []

    def test_missing_file(self, tmp_path, config, capsys) -> None:
        """An unreadable file yields an empty result and an error message."""
        deck = read_deck(str(tmp_path / "nope.txt"), config)

        assert not deck.ok
        assert deck.energy_costs == []
        assert deck.invalid_cards == []
        assert "[ERROR] Could not read deck file" in capsys.readouterr().out

    def test_undecodable_bytes_invalidate_only_their_line(self, tmp_path, config, capsys) -> None:
        """A line with bytes that are not UTF-8 is an invalid entry; the rest of the deck is read."""
        path = tmp_path / "deck.txt"
        path.write_bytes(b"Strike:1\nCrush:3\nCaf\xe9:2\n")

        deck = read_deck(str(path), config)

        assert deck.ok
        assert deck.energy_costs == [1, 3]
        assert deck.invalid_cards == ["Caf\ufffd:2"]
        assert "[ERROR]" not in capsys.readouterr().out
