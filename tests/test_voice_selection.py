import pytest

from trai.voice_selection import MOOD_TO_VOICE, get_voice_by_preference, get_voices_by_emotion, select_voice_for_mood


def test_anxious_maps_to_carla():
    assert select_voice_for_mood("anxious").display_name == "Carla"


def test_user_preference_overrides_mood():
    assert select_voice_for_mood("anxious", "Hope").display_name == "Hope"
    assert select_voice_for_mood("anxious", "hope").display_name == "Hope"


def test_preference_is_substring_match():
    assert select_voice_for_mood("calm", "marc").display_name == "Marcus"


def test_unknown_preference_uses_mood_table():
    assert select_voice_for_mood("confident", "Zed").display_name == "Bronson"


def test_blank_preference_is_ignored():
    assert select_voice_for_mood("clear", "  ").display_name == "Alexandra"
    assert get_voice_by_preference("") is None


@pytest.mark.parametrize("mood", ["furious", "", None])
def test_unmapped_mood_falls_back_to_default(mood):
    assert select_voice_for_mood(mood).display_name == "James"


def test_mood_lookup_is_case_insensitive():
    assert select_voice_for_mood("Happy").display_name == "Hope"


def test_every_mapped_mood_resolves_to_catalog_voice():
    for mood, name in MOOD_TO_VOICE.items():
        assert select_voice_for_mood(mood).display_name == name


def test_voices_by_emotion_combines_tags_and_mood_table():
    names = [v.display_name for v in get_voices_by_emotion("supportive")]
    assert "Bronson" in names and "Marcus" in names
    assert names.count("Marcus") == 1
    assert [v.display_name for v in get_voices_by_emotion("anxious")] == ["Carla"]
