import pytest

from trai.emotional_context import EmotionalContext
from trai.errors import ConfigurationError
from trai.pipeline import plan_voice_response
from trai import pipeline


def test_goal_message_energizes_with_default_voice():
    plan = plan_voice_response("I achieved my goal today!")
    assert plan.context == EmotionalContext.energizing
    assert plan.voice.display_name == "James"
    assert plan.alert.visible is False


def test_prior_emotion_drives_voice_when_no_mood():
    plan = plan_voice_response("just checking in", prior_emotion="stressed")
    assert plan.context == EmotionalContext.calming
    assert plan.voice.display_name == "Charlotte"


def test_preference_and_intensity_zero_keep_base_settings():
    plan = plan_voice_response("help", mood="anxious", voice_preference="Hope", intensity=0.0)
    assert plan.voice.display_name == "Hope"
    assert plan.context == EmotionalContext.crisis
    assert (plan.parameters.stability, plan.parameters.style) == (0.45, 0.65)


def test_configuration_error_propagates(monkeypatch):

    def broken(*args, **kwargs):
        raise ConfigurationError("no profile")

    monkeypatch.setattr(pipeline, "synthesize", broken)
    with pytest.raises(ConfigurationError):
        plan_voice_response("hello")
