"""
Tests for the Wordle group summary parser.
"""

from wordle_league.core.models import ParsedEntry
from wordle_league.wordle.parser import classify_line, extract_user_ids, parse_summary


SUMMARY_HANDLES = """Your group is on a 2 day streak! 🔥 Here are yesterday's results:
👑 3/6: @anika
4/6: @jiawen
5/6: @bonsen @zahir
X/6: @jiunee"""

SUMMARY_MENTIONS = """**Wordle No. 1234**
Your group is on a 5 day streak! 🔥 Here are yesterday's results:
👑 3/6: <@111> <@!222>
6/6: <@333>
X/6: <@444>"""


class TestParseSummaryBasics:
    def test_single_mention_win(self):
        parsed = parse_summary("3/6: <@123>")
        assert parsed is not None
        assert parsed.entries == [ParsedEntry(user_id="123", guesses=3, failed=False)]
        assert parsed.puzzle_number is None

    def test_plain_handle_fail(self):
        parsed = parse_summary("X/6: @nina")
        assert parsed.entries == [ParsedEntry(user_id="@nina", guesses=None, failed=True)]

    def test_lowercase_x_is_a_fail(self):
        parsed = parse_summary("x/6: <@9>")
        assert parsed.entries[0].failed is True
        assert parsed.entries[0].guesses is None

    def test_last_title_wins(self):
        parsed = parse_summary("Wordle No. 452\nWordle no. 453 recap\n2/6: <@1>")
        assert parsed.puzzle_number == 453

    def test_title_and_score_on_same_line(self):
        parsed = parse_summary("Wordle No. 452 ... Wordle No. 453 ... 4/6: <@7>")
        assert parsed.puzzle_number == 453
        assert parsed.entries[0].guesses == 4

    def test_last_title_on_a_header_line(self):
        parsed = parse_summary("Wordle No. 10 (was Wordle No. 11)\n3/6: <@1>")
        assert parsed.puzzle_number == 11

    def test_empty_input_returns_none(self):
        assert parse_summary("") is None
        assert parse_summary(None) is None

    def test_unrelated_text_returns_none(self):
        assert parse_summary("good morning everyone\nWordle No. 900") is None

    def test_score_line_without_users_returns_none(self):
        assert parse_summary("3/6: nobody here") is None

    def test_bare_at_contributes_nothing(self):
        assert parse_summary("3/6: @") is None


class TestParseSummaryMessages:
    def test_handle_summary(self):
        parsed = parse_summary(SUMMARY_HANDLES)
        assert [(e.user_id, e.guesses, e.failed) for e in parsed.entries] == [
            ("@anika", 3, False),
            ("@jiawen", 4, False),
            ("@bonsen", 5, False),
            ("@zahir", 5, False),
            ("@jiunee", None, True),
        ]

    def test_mention_summary(self):
        parsed = parse_summary(SUMMARY_MENTIONS)
        assert [(e.user_id, e.guesses) for e in parsed.entries] == [
            ("111", 3), ("222", 3), ("333", 6), ("444", None),
        ]
        assert parsed.puzzle_number == 1234

    def test_handles_with_spaces_are_kept_whole(self):
        parsed = parse_summary("6/6: @Zahir Hassan")
        assert parsed.entries[0].user_id == "@zahir hassan"

    def test_windows_and_old_mac_newlines(self):
        parsed = parse_summary("2/6: <@1>\r\n3/6: <@2>\r4/6: <@3>")
        assert [e.guesses for e in parsed.entries] == [2, 3, 4]

    def test_every_accepted_message_has_entries(self):
        for text in (SUMMARY_HANDLES, SUMMARY_MENTIONS, "1/6: <@5>"):
            assert len(parse_summary(text).entries) >= 1

    def test_repeated_calls_are_independent(self):
        first = parse_summary(SUMMARY_MENTIONS)
        second = parse_summary(SUMMARY_MENTIONS)
        assert first == second
        assert parse_summary("5/6: <@8>").entries == [ParsedEntry("8", 5, False)]


class TestClassifyLine:
    def test_win_at_line_start(self):
        assert classify_line("5/6: @a") == (5, False)

    def test_win_after_prefix_text(self):
        assert classify_line("🏆 yesterday 2/6 : @a") == (2, False)

    def test_fail(self):
        assert classify_line("X/6: @a") == (None, True)

    def test_seven_is_not_a_score(self):
        assert classify_line("7/6: @a") is None

    def test_score_glued_to_other_digits_is_ignored(self):
        assert classify_line("13/6: @a") is None

    def test_missing_colon(self):
        assert classify_line("3/6 @a") is None


class TestExtractUserIds:
    def test_mentions_take_precedence_over_handles(self):
        assert extract_user_ids("3/6: <@1> @bob") == ["1"]

    def test_handles_used_when_no_mentions(self):
        assert extract_user_ids("3/6: @Bob  @ Carol ") == ["@bob", "@carol"]

    def test_nothing_found(self):
        assert extract_user_ids("3/6:") == []
