"""Unit tests for the mood heuristic."""

import pytest

from mira.router.mood import Mood, classify


class TestClassify:
    """Tests for classify()."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("I feel so sad today", Mood.SAD),
            ("I'm really stressed about exams", Mood.STRESSED),
            ("this makes me furious", Mood.ANGRY),
            ("I'm so excited for the trip", Mood.HAPPY),
            ("open youtube", Mood.NEUTRAL),
        ],
    )
    def test_single_mood(self, text: str, expected: Mood) -> None:
        """Test utterances with one mood keyword."""
        assert classify(text) == expected

    def test_crisis_wins(self) -> None:
        """Test crisis outranks every other mood."""
        assert classify("I'm happy but sad and I want to die") == Mood.CRISIS

    def test_sad_beats_stressed(self) -> None:
        """Test priority order between sad and stressed."""
        assert classify("stressed and lonely") == Mood.SAD

    def test_word_boundaries(self) -> None:
        """Test keywords inside other words do not count."""
        assert classify("download the latest hits") == Mood.NEUTRAL
        assert classify("what happened to the crystal vase") == Mood.NEUTRAL

    @pytest.mark.parametrize(
        "text",
        ["I have thought about suicides lately", "she wrote about suicidal thoughts"],
    )
    def test_inflected_crisis(self, text: str) -> None:
        """Test crisis keywords match inside longer words."""
        assert classify(text) == Mood.CRISIS

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("I've been crying all night", Mood.SAD),
            ("she cried for hours", Mood.SAD),
            ("I panicked before the exam", Mood.STRESSED),
            ("this is so frustrating", Mood.ANGRY),
            ("happiest day of my life", Mood.HAPPY),
        ],
    )
    def test_inflected_keywords(self, text: str, expected: Mood) -> None:
        """Test common inflections of mood keywords."""
        assert classify(text) == expected

    def test_case_insensitive(self) -> None:
        """Test matching ignores case."""
        assert classify("I AM ANGRY") == Mood.ANGRY

    def test_empty(self) -> None:
        """Test empty text is neutral."""
        assert classify("") == Mood.NEUTRAL
