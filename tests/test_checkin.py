"""Tests for the daily check-in description codec."""

from app.tracker.checkin import EMOTION_OPTIONS, decode_checkin, encode_checkin, score_label
from app.tracker.models import CheckIn


class TestEncodeCheckin:
    def test_basic(self):
        checkin = CheckIn(score=7, notes="Good day", emotions=["happy", "calm"])
        assert encode_checkin(checkin) == "7|Good day|happy,calm"

    def test_no_notes_no_emotions(self):
        assert encode_checkin(CheckIn(score=3)) == "3||"

    def test_blank_emotions_dropped(self):
        assert encode_checkin(CheckIn(score=4, emotions=["tired", " "])) == "4||tired"


class TestDecodeCheckin:
    def test_basic(self):
        checkin = decode_checkin("7|Good day|happy,calm")
        assert checkin.score == 7
        assert checkin.notes == "Good day"
        assert checkin.emotions == ["happy", "calm"]

    def test_empty_and_none_defaults(self):
        for text in ("", None):
            checkin = decode_checkin(text)
            assert checkin.score == 5
            assert checkin.notes == ""
            assert checkin.emotions == []

    def test_bad_score_defaults(self):
        checkin = decode_checkin("abc|notes|")
        assert checkin.score == 5
        assert checkin.notes == "notes"
        assert checkin.emotions == []

    def test_score_clamped(self):
        assert decode_checkin("15||").score == 10
        assert decode_checkin("0||").score == 1

    def test_notes_with_pipes_roundtrip(self):
        original = CheckIn(score=6, notes="legs|lungs", emotions=["tired"])
        text = encode_checkin(original)
        assert text == "6|legs|lungs|tired"
        assert decode_checkin(text) == original

    def test_plain_text_kept_as_notes(self):
        checkin = decode_checkin("slept badly")
        assert checkin.score == 5
        assert checkin.notes == "slept badly"

    def test_score_only(self):
        assert decode_checkin("8").score == 8

    def test_two_segments(self):
        checkin = decode_checkin("4|only notes")
        assert checkin.score == 4
        assert checkin.notes == "only notes"
        assert checkin.emotions == []

    def test_two_segments_plain_text_kept_whole(self):
        checkin = decode_checkin("slept badly|really")
        assert checkin.score == 5
        assert checkin.notes == "slept badly|really"
        assert checkin.emotions == []

    def test_two_segments_empty_score(self):
        checkin = decode_checkin("|just notes")
        assert checkin.score == 5
        assert checkin.notes == "just notes"

    def test_unknown_emotions_kept(self):
        checkin = decode_checkin("5||happy,stoked")
        assert checkin.emotions == ["happy", "stoked"]
        assert "stoked" not in EMOTION_OPTIONS


class TestScoreLabel:
    def test_boundaries(self):
        assert score_label(1) == "Poor"
        assert score_label(2) == "Poor"
        assert score_label(3) == "Below Average"
        assert score_label(5) == "Average"
        assert score_label(6) == "Average"
        assert score_label(8) == "Good"
        assert score_label(9) == "Excellent"
        assert score_label(10) == "Excellent"
