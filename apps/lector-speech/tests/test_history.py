import asyncio

import pytest

from lector_speech.errors import RecordError
from lector_speech.history import HistoryEntry, HistoryStore


def _entry(caller_id="user-1", path="user-1/1-aaaaaaa-chunk-0.mp3", size=1024, chunks=2):
    return HistoryEntry(
        caller_id=caller_id,
        text_content="Some text.",
        voice_id="nPczCjzI2devNBz1zQrb",
        voice_name="Brian",
        model_id="eleven_multilingual_v2",
        file_path=path,
        file_size=size,
        chunk_count=chunks,
    )


def _with_store(tmp_path, fn):
    async def scenario():
        store = HistoryStore(str(tmp_path / "history.db"))
        await store.init()
        try:
            return await fn(store)
        finally:
            await store.close()

    return asyncio.run(scenario())


def test_record_and_get(tmp_path):
    async def fn(store):
        rid = await store.record(_entry())
        return rid, await store.get(rid)

    rid, record = _with_store(tmp_path, fn)
    assert record.id == rid
    assert record.caller_id == "user-1"
    assert record.file_size == 1024
    assert record.chunk_count == 2
    assert record.created_at
    assert record.to_dict()["voice_name"] == "Brian"


def test_list_is_scoped_to_caller(tmp_path):
    async def fn(store):
        await store.record(_entry(caller_id="user-1", path="a.mp3"))
        await store.record(_entry(caller_id="user-1", path="b.mp3"))
        await store.record(_entry(caller_id="user-2", path="c.mp3"))
        await store.record(_entry(caller_id=None, path="d.mp3"))
        return (
            await store.list_for_caller("user-1"),
            await store.list_for_caller(None),
            await store.list_for_caller("user-1", limit=1),
        )

    mine, anonymous, limited = _with_store(tmp_path, fn)
    assert [r.file_path for r in mine] == ["b.mp3", "a.mp3"]
    assert [r.file_path for r in anonymous] == ["d.mp3"]
    assert len(limited) == 1


def test_delete(tmp_path):
    async def fn(store):
        rid = await store.record(_entry())
        first = await store.delete(rid)
        second = await store.delete(rid)
        return first, second, await store.get(rid)

    assert _with_store(tmp_path, fn) == (True, False, None)


def test_get_unknown_is_none(tmp_path):
    async def fn(store):
        return await store.get("missing")

    assert _with_store(tmp_path, fn) is None


def test_record_on_closed_store_is_record_error(tmp_path):
    store = HistoryStore(str(tmp_path / "history.db"))
    with pytest.raises(RecordError):
        asyncio.run(store.record(_entry()))
