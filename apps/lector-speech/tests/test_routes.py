import asyncio
import base64

import httpx
import pytest
from fastapi.testclient import TestClient
from speech_fakes import FakeRecorder, FakeSynthesizer, make_token

from lector_speech.main import app
from lector_speech.pipeline import SynthesisPipeline
from lector_speech.routes import set_components
from lector_speech.translation import GoogleTranslateClient


def _translate_handler(request: httpx.Request) -> httpx.Response:
    return httpx.Response(
        200,
        json={"data": {"translations": [{"translatedText": "Hola mundo", "detectedSourceLanguage": "en"}]}},
    )


@pytest.fixture()
def components(store, identity):
    synth = FakeSynthesizer()
    recorder = FakeRecorder()
    translator = GoogleTranslateClient("key", transport=httpx.MockTransport(_translate_handler))
    asyncio.run(translator.start())

    def install(synthesizer=synth, max_chunk_chars=10000, history=recorder):
        set_components(
            pipeline=SynthesisPipeline(synthesizer, store, history, identity, max_chunk_chars=max_chunk_chars),
            store=store,
            history=history,
            identity=identity,
            translator=translator,
        )

    install()
    yield {"synth": synth, "recorder": recorder, "install": install}
    set_components()


@pytest.fixture()
def client(components):
    return TestClient(app)


def _auth(sub="user-1"):
    return {"Authorization": f"Bearer {make_token(sub)}"}


def test_text_to_speech_returns_camel_case_chunks(client, audio_root):
    r = client.post("/v1/text-to-speech", json={"text": "Hello there. General Kenobi."})
    assert r.status_code == 200
    body = r.json()

    assert body["success"] is True
    assert body["totalChunks"] == 1
    assert body["contentType"] == "audio/mpeg"
    assert body["historyId"] == "rec-1"

    chunk = body["chunks"][0]
    assert set(chunk) == {"index", "audioData", "filePath", "size", "textLength"}
    assert base64.b64decode(chunk["audioData"]) == b"mp3:0:Hello there. General Kenobi."
    assert chunk["filePath"].startswith("anonymous/")
    assert (audio_root / chunk["filePath"]).exists()


def test_text_to_speech_splits_long_text(client, components):
    components["install"](max_chunk_chars=10)
    r = client.post("/v1/text-to-speech", json={"text": "Aaaaaaaa. Bbbbbbbb. Cccccccc."}, headers=_auth())
    assert r.status_code == 200
    body = r.json()

    assert body["totalChunks"] == 3
    assert [c["index"] for c in body["chunks"]] == [0, 1, 2]
    assert all(c["filePath"].startswith("user-1/") for c in body["chunks"])


def test_text_to_speech_blank_text_is_400(client, components):
    r = client.post("/v1/text-to-speech", json={"text": "   "})
    assert r.status_code == 400
    assert r.json() == {"success": False, "error": "Text is required"}
    assert components["synth"].calls == []


def test_text_to_speech_missing_text_is_400(client):
    r = client.post("/v1/text-to-speech", json={"voice_id": "abc"})
    assert r.status_code == 400
    body = r.json()
    assert body["success"] is False
    assert body["error"].startswith("text:")


def test_backend_rate_limit_status_is_passed_through(client, components, audio_root):
    components["install"](synthesizer=FakeSynthesizer(fail_on_call=0, status=429))
    r = client.post("/v1/text-to-speech", json={"text": "Hello."})

    assert r.status_code == 429
    body = r.json()
    assert body["success"] is False
    assert "429" in body["error"]
    assert not list(audio_root.rglob("*.mp3"))


def test_history_write_failure_still_returns_audio(client, components, audio_root):
    components["install"](max_chunk_chars=10, history=FakeRecorder(fail=True))
    r = client.post("/v1/text-to-speech", json={"text": "Aaaaaaaa. Bbbbbbbb."})

    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["historyId"] is None
    assert body["totalChunks"] == 2
    assert all((audio_root / c["filePath"]).exists() for c in body["chunks"])


def test_malformed_custom_voice_is_400(client, components):
    r = client.post(
        "/v1/text-to-speech",
        json={"text": "Hello.", "voice_id": "custom", "custom_voice_id": "../../v1/voices/add"},
    )
    assert r.status_code == 400
    assert r.json() == {"success": False, "error": "Invalid voice ID"}
    assert components["synth"].calls == []


def test_unconfigured_service_is_503(client):
    set_components()
    r = client.post("/v1/text-to-speech", json={"text": "Hello."})
    assert r.status_code == 503
    assert r.json() == {"success": False, "error": "Synthesis pipeline not initialized"}


def test_translate(client):
    r = client.post("/v1/translate", json={"text": "Hello world", "targetLanguage": "es"})
    assert r.status_code == 200
    assert r.json() == {
        "success": True,
        "translatedText": "Hola mundo",
        "detectedLanguage": "en",
        "originalText": "Hello world",
    }


def test_translate_rejects_unsupported_language(client):
    r = client.post("/v1/translate", json={"text": "Hello", "targetLanguage": "xx"})
    assert r.status_code == 400
    assert r.json()["success"] is False


@pytest.mark.parametrize("path, known_id", [
    ("/v1/voices", "nPczCjzI2devNBz1zQrb"),
    ("/v1/models", "eleven_multilingual_v2"),
    ("/v1/languages", "es"),
])
def test_catalogs(client, path, known_id):
    r = client.get(path)
    assert r.status_code == 200
    entries = r.json()
    assert all(set(e) == {"id", "name"} for e in entries)
    assert known_id in {e["id"] for e in entries}


def test_history_list_audio_and_delete(client, audio_root):
    r = client.post("/v1/text-to-speech", json={"text": "Keep this."}, headers=_auth())
    history_id = r.json()["historyId"]
    file_path = r.json()["chunks"][0]["filePath"]

    r = client.get("/v1/history", headers=_auth())
    assert r.status_code == 200
    items = r.json()
    assert [i["id"] for i in items] == [history_id]
    assert items[0]["chunk_count"] == 1
    assert items[0]["voice_name"] == "Brian"

    # Anonymous callers see only anonymous records
    assert client.get("/v1/history").json() == []

    r = client.get(f"/v1/history/{history_id}/audio", headers=_auth())
    assert r.status_code == 200
    assert r.headers["content-type"] == "audio/mpeg"
    assert r.content == b"mp3:0:Keep this."

    r = client.delete(f"/v1/history/{history_id}", headers=_auth())
    assert r.status_code == 200
    assert r.json() == {"success": True, "id": history_id}
    assert not (audio_root / file_path).exists()

    r = client.get(f"/v1/history/{history_id}/audio", headers=_auth())
    assert r.status_code == 404


def test_history_of_another_caller_is_not_found(client):
    r = client.post("/v1/text-to-speech", json={"text": "Mine."}, headers=_auth("owner"))
    history_id = r.json()["historyId"]

    r = client.get(f"/v1/history/{history_id}/audio", headers=_auth("intruder"))
    assert r.status_code == 404
    r = client.delete(f"/v1/history/{history_id}", headers=_auth("intruder"))
    assert r.status_code == 404
    assert r.json()["error"] == "History entry not found"


def test_delete_survives_missing_audio(client, audio_root, components):
    r = client.post("/v1/text-to-speech", json={"text": "Gone soon."})
    history_id = r.json()["historyId"]
    (audio_root / r.json()["chunks"][0]["filePath"]).unlink()

    r = client.delete(f"/v1/history/{history_id}")
    assert r.status_code == 200
    assert components["recorder"].records == {}


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "ok"
    assert body["service"] == "lector-speech"
    assert body["synthesis_backend"] == "elevenlabs"


def test_request_id_is_echoed(client):
    r = client.get("/v1/voices", headers={"x-request-id": "req-42"})
    assert r.headers["x-request-id"] == "req-42"
