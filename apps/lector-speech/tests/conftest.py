import pytest
from speech_fakes import JWT_SECRET

from lector_speech.identity import CallerResolver
from lector_speech.storage.local import LocalAudioStore


@pytest.fixture()
def audio_root(tmp_path):
    root = tmp_path / "audio"
    root.mkdir()
    return root


@pytest.fixture()
def store(audio_root):
    return LocalAudioStore(str(audio_root))


@pytest.fixture()
def identity():
    return CallerResolver(JWT_SECRET)
