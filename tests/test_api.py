import uuid
from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient

from trai import main
from trai.main import app
from trai.models import SafetyCheckIn, as_utc

client = TestClient(app)


def new_session():
    return f"test-{uuid.uuid4()}"


def test_status_reports_providers():
    r = client.get('/api/status')
    assert r.status_code == 200
    j = r.json()
    assert j['voices'] == 8
    assert j['default_voice'] == 'James'
    assert j['tts_configured'] is False


def test_list_voices_and_gender_filter():
    r = client.get('/api/voices')
    assert r.status_code == 200
    assert len(r.json()) == 8
    r2 = client.get('/api/voices', params={'gender': 'female'})
    assert {v['display_name'] for v in r2.json()} == {'Alexandra', 'Carla', 'Hope', 'Charlotte'}
    assert client.get('/api/voices', params={'gender': 'robot'}).json() == []


def test_default_voice_and_id_lookup():
    assert client.get('/api/voices/default').json()['display_name'] == 'James'
    assert client.get('/api/voices/brian/id').json()['voice_id'] == 'nPczCjzI2devNBz1zQrb'
    assert client.get('/api/voices/unknown/id').json()['voice_id'] == 'EkK5I93UQWFDigLMpZcX'


def test_context_endpoint():
    r = client.post('/api/voice/context', json={'message': 'I achieved my goal today!'})
    assert r.json() == {'context': 'energizing'}
    r2 = client.post('/api/voice/context', json={'message': '', 'emotion': 'lonely'})
    assert r2.json() == {'context': 'comforting'}


def test_select_endpoint_preference_wins():
    r = client.post('/api/voice/select', json={'mood': 'anxious', 'preference': 'Hope'})
    assert r.status_code == 200
    assert r.json()['display_name'] == 'Hope'


def test_parameters_endpoint():
    r = client.post('/api/voice/parameters', json={'voice': 'carla', 'context': 'crisis', 'intensity': 1.0})
    assert r.status_code == 200
    j = r.json()
    assert j['voice_id'] == 'l32B8XDoylOsZKiSdfhE'
    assert (j['stability'], j['style'], j['similarity_boost'], j['speaker_boost']) == (0.8, 0.4, 0.9, True)


def test_parameters_unknown_voice_404():
    r = client.post('/api/voice/parameters', json={'voice': 'nobody', 'context': 'calming'})
    assert r.status_code == 404


def test_parameters_rejects_bad_input():
    assert client.post('/api/voice/parameters', json={'voice': 'james', 'intensity': 2}).status_code == 422
    assert client.post('/api/voice/parameters', json={'voice': 'james', 'context': 'angry'}).status_code == 422


def test_configuration_error_is_500(monkeypatch):
    def broken(*args, **kwargs):
        raise main.ConfigurationError("profile missing")

    monkeypatch.setattr(main, "synthesize", broken)
    r = client.post('/api/voice/parameters', json={'voice': 'james', 'context': 'calming'})
    assert r.status_code == 500
    assert r.json()['detail'] == 'Voice configuration error'


def test_plan_end_to_end_anxious_overwhelmed():
    r = client.post('/api/voice/plan', json={
        'message': 'I feel so anxious and overwhelmed today',
        'mood': 'anxious',
        'intensity': 1.0,
    })
    assert r.status_code == 200
    j = r.json()
    assert j['context'] == 'crisis'
    assert j['voice']['display_name'] == 'Carla'
    p = j['parameters']
    assert (p['stability'], p['style']) == (0.8, 0.4)
    assert (p['similarity_boost'], p['speaker_boost']) == (0.9, True)
    assert j['alert']['visible'] is False
    assert j['reply'] is None


def test_plan_with_reply_and_crisis_analysis():
    r = client.post('/api/voice/plan', json={
        'message': 'I want to give up',
        'reply': 'I am here.',
        'crisis_analysis': {'risk_level': 'critical', 'support_message': 'Please reach out.', 'confidence_score': 0.9},
    })
    j = r.json()
    assert j['reply'].endswith('I am here.') and j['reply'] != 'I am here.'
    assert j['alert']['tier'] == 'urgent'
    assert any(a['href'] == 'tel:988' for a in j['alert']['actions'])


def test_speak_without_key_is_503():
    r = client.post('/api/voice/speak', json={'text': 'hello', 'voice': 'james'})
    assert r.status_code == 503


def test_speak_returns_audio(monkeypatch):
    monkeypatch.setattr(main, "synthesize_speech", lambda text, params: b"ID3fake")
    r = client.post('/api/voice/speak', json={'text': 'hello', 'voice': 'hope', 'context': 'energizing'})
    assert r.status_code == 200
    assert r.headers['content-type'] == 'audio/mpeg'
    assert r.content == b"ID3fake"


def test_crisis_analyze_low_risk_not_persisted():
    sid = new_session()
    r = client.post('/api/crisis/analyze', json={'session_id': sid, 'message': 'Today was fine'})
    assert r.status_code == 200
    j = r.json()
    assert j['analysis']['risk_level'] == 'none'
    assert j['alert']['visible'] is False
    assert client.get(f'/api/safety/{sid}').json() == []
    assert client.get(f'/api/checkins/{sid}').json() == []


def test_crisis_analyze_critical_logs_event_and_schedules_checkin():
    sid = new_session()
    r = client.post('/api/crisis/analyze', json={'session_id': sid, 'message': 'I want to kill myself'})
    j = r.json()
    assert j['analysis']['risk_level'] == 'critical'
    assert j['analysis']['check_in_scheduled'] is True
    assert j['alert']['tier'] == 'urgent'
    assert j['alert']['check_in_notice']

    events = client.get(f'/api/safety/{sid}').json()
    assert len(events) == 1 and events[0]['risk_level'] == 'critical'

    checkins = client.get(f'/api/checkins/{sid}').json()
    assert len(checkins) == 1
    c = checkins[0]
    assert c['response_received'] is False and c['follow_up_at']

    msg = client.get(f"/api/checkins/{c['id']}/message").json()['message']
    assert 'safe place' in msg

    done = client.post(f"/api/checkins/{c['id']}/respond").json()
    assert done['response_received'] is True


def test_medium_risk_schedules_checkin_after_a_day():
    sid = new_session()
    j = client.post('/api/crisis/analyze', json={'session_id': sid, 'message': 'I feel so isolated'}).json()
    assert j['analysis']['risk_level'] == 'medium'
    assert j['analysis']['requires_check_in'] is True
    assert j['analysis']['check_in_scheduled'] is True
    assert j['alert']['tier'] == 'informational'
    assert j['alert']['check_in_notice']
    assert j['alert']['emergency_contacts'] == []
    assert client.get(f'/api/safety/{sid}').json() == []

    checkins = client.get(f'/api/checkins/{sid}').json()
    assert len(checkins) == 1
    c = checkins[0]
    created = datetime.fromisoformat(c['created_at'])
    assert datetime.fromisoformat(c['follow_up_at']) - created == timedelta(hours=24)


def test_high_risk_persists_and_checkin_message_reads_back():
    sid = new_session()
    r = client.post('/api/crisis/analyze', json={'session_id': sid, 'message': 'I keep wanting to cut myself'})
    assert r.status_code == 200
    assert r.json()['analysis']['risk_level'] == 'high'

    events = client.get(f'/api/safety/{sid}').json()
    assert len(events) == 1 and events[0]['analysis']['risk_level'] == 'high'

    c = client.get(f'/api/checkins/{sid}').json()[0]
    assert datetime.fromisoformat(c['follow_up_at']) - datetime.fromisoformat(c['created_at']) == timedelta(hours=6)
    msg = client.get(f"/api/checkins/{c['id']}/message")
    assert msg.status_code == 200
    assert 'follow up' in msg.json()['message']


def test_check_in_rows_carry_utc_timestamps():
    row = SafetyCheckIn(session_id='s', risk_level='high', trigger_message='m')
    assert row.created_at.tzinfo is not None
    assert as_utc(datetime(2024, 1, 1)).tzinfo == timezone.utc


def test_unknown_checkin_404():
    assert client.post('/api/checkins/999999/respond').status_code == 404


def test_alert_endpoint():
    r = client.post('/api/crisis/alert', json={'risk_level': 'high', 'emergency_contacts': ['Emergency Services: 911']})
    j = r.json()
    assert j['tier'] == 'elevated'
    assert j['emergency_contacts'] == ['Emergency Services: 911']
    low = client.post('/api/crisis/alert', json={'risk_level': 'low'}).json()
    none = client.post('/api/crisis/alert', json={'risk_level': 'none'}).json()
    assert low == none
