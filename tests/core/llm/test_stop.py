"""Unit tests for client-side stop-sequence handling."""

from discbot.core.llm.stop import StopSequenceFilter, truncate_at_stop


def _run(stop, pieces):
    stop_filter = StopSequenceFilter(stop)
    emitted = [stop_filter.feed(p) for p in pieces]
    emitted.append(stop_filter.flush())
    return emitted, stop_filter.stopped


class TestStopSequenceFilter:
    def test_without_stop_sequences_text_passes_straight_through(self):
        emitted, stopped = _run((), ["a", "b", "c"])
        assert emitted == ["a", "b", "c", ""]
        assert not stopped

    def test_stop_inside_single_piece(self):
        emitted, stopped = _run(["END"], ["hello END world"])
        assert "".join(emitted) == "hello "
        assert stopped

    def test_stop_split_across_pieces(self):
        emitted, stopped = _run(["END"], ["abc E", "ND tail"])
        assert "".join(emitted) == "abc "
        assert stopped

    def test_partial_prefix_released_when_it_does_not_complete(self):
        emitted, stopped = _run(["END"], ["abc E", "xyz"])
        assert "".join(emitted) == "abc Exyz"
        assert not stopped

    def test_holds_only_possible_prefix(self):
        stop_filter = StopSequenceFilter(["\nHuman:"])
        assert stop_filter.feed("answer\nHu") == "answer"
        assert stop_filter.feed("go") == "\nHugo"

    def test_holds_longest_possible_prefix(self):
        stop_filter = StopSequenceFilter(["abab"])
        assert stop_filter.feed("xaba") == "x"
        assert stop_filter.feed("b") == ""
        assert stop_filter.stopped

    def test_pending_prefix_released_on_flush(self):
        stop_filter = StopSequenceFilter(["END"])
        assert stop_filter.feed("text EN") == "text "
        assert stop_filter.flush() == "EN"

    def test_earliest_of_several_stop_sequences_wins(self):
        emitted, _ = _run(["zzz", "b"], ["a b zzz"])
        assert "".join(emitted) == "a "

    def test_nothing_emitted_after_stop(self):
        stop_filter = StopSequenceFilter(["."])
        assert stop_filter.feed("one. two") == "one"
        assert stop_filter.feed("three") == ""
        assert stop_filter.flush() == ""

    def test_empty_stop_strings_are_ignored(self):
        emitted, stopped = _run(["", "X"], ["abc"])
        assert "".join(emitted) == "abc"
        assert not stopped


class TestTruncateAtStop:
    def test_truncates_at_first_stop(self):
        assert truncate_at_stop("first answerSTOPmore", ["STOP"]) == "first answer"

    def test_no_stop_returns_text(self):
        assert truncate_at_stop("plain text", []) == "plain text"
        assert truncate_at_stop("plain text", ["STOP"]) == "plain text"

    def test_trailing_partial_prefix_is_kept(self):
        assert truncate_at_stop("ends with ST", ["STOP"]) == "ends with ST"
