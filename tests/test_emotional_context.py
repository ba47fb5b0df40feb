import pytest

from trai.emotional_context import EmotionalContext, detect_emotional_context, frame_response, RESPONSE_OPENERS


@pytest.mark.parametrize("message, expected", [
    ("I need help right now", EmotionalContext.crisis),
    ("I'm so anxious about tomorrow", EmotionalContext.calming),
    ("I feel lonely tonight", EmotionalContext.comforting),
    ("I achieved my goal today!", EmotionalContext.energizing),
    ("Tell me about the weather", EmotionalContext.supportive),
])
def test_keyword_tiers(message, expected):
    assert detect_emotional_context(message) == expected


def test_crisis_tier_beats_energizing():
    assert detect_emotional_context("help me reach my goal") == EmotionalContext.crisis


def test_earlier_tier_wins_regardless_of_match_count():
    msg = "happy excited success progress but a little worried"
    assert detect_emotional_context(msg) == EmotionalContext.calming


def test_overwhelmed_is_crisis_even_with_anxious():
    assert detect_emotional_context("I feel so anxious and overwhelmed today") == EmotionalContext.crisis


def test_matching_is_case_insensitive_substring():
    assert detect_emotional_context("PANIC") == EmotionalContext.crisis
    # substring behaviour is kept as-is: "harm" inside "pharmaceutical"
    assert detect_emotional_context("my pharmaceutical exam") == EmotionalContext.crisis


@pytest.mark.parametrize("emotion, expected", [
    ("sad", EmotionalContext.comforting),
    ("Grief", EmotionalContext.comforting),
    ("stressed", EmotionalContext.calming),
    ("motivated", EmotionalContext.energizing),
    ("panic", EmotionalContext.crisis),
    ("bored", EmotionalContext.supportive),
])
def test_prior_emotion_used_when_no_keywords(emotion, expected):
    assert detect_emotional_context("nothing much to say", emotion) == expected


def test_keywords_beat_prior_emotion():
    assert detect_emotional_context("I feel sad", "happy") == EmotionalContext.comforting


def test_blank_message_falls_through():
    assert detect_emotional_context("   ") == EmotionalContext.supportive
    assert detect_emotional_context("", "anxious") == EmotionalContext.calming
    assert detect_emotional_context(None) == EmotionalContext.supportive


def test_frame_response_neutral_and_low_intensity_unchanged():
    assert frame_response("Hello.", EmotionalContext.neutral) == "Hello."
    assert frame_response("Hello.", EmotionalContext.crisis, intensity=0.2) == "Hello."


def test_frame_response_adds_context_opener():
    out = frame_response("Hello.", EmotionalContext.calming, intensity=0.5)
    assert out.endswith("Hello.")
    assert any(out.startswith(o) for o in RESPONSE_OPENERS[EmotionalContext.calming])
