import pytest

from lector_speech.chunker import chunk_text, split_into_chunks, split_sentences

BOUND = 10000


def _sentence(length, fill="a"):
    # `length` characters including the terminator and trailing space
    return fill * (length - 2) + ". "


def test_short_text_is_a_single_chunk():
    text = "x" * 500
    assert chunk_text(text, BOUND) == [text]


def test_text_at_exact_bound_is_not_split():
    text = "Hello there. " * 10
    assert chunk_text(text, len(text)) == [text]


def test_three_long_sentences_pack_two_then_one():
    text = _sentence(4000, "a") + _sentence(4000, "b") + "c" * 3999 + "."
    chunks = chunk_text(text, BOUND)

    assert len(chunks) == 2
    assert len(chunks[0]) == 8000
    assert len(chunks[1]) == 4000
    assert chunks[1].startswith("c")


def test_unbroken_text_over_bound_is_one_oversized_chunk():
    text = "x" * 15000
    chunks = chunk_text(text, BOUND)
    assert chunks == [text]


def test_oversized_sentence_falls_back_to_words():
    words = ["word%03d" % i for i in range(300)]  # 7 chars + space each
    sentence = " ".join(words) + "."
    chunks = chunk_text(sentence, 100)

    assert len(chunks) > 1
    assert all(len(c) <= 100 for c in chunks)
    assert "".join(chunks) == sentence
    # No word is cut in half
    for chunk in chunks:
        for token in chunk.split():
            assert token.rstrip(".") in words


def test_oversized_sentence_flushes_pending_buffer_first():
    short = "Short one. "
    long_sentence = " ".join(["w" * 9] * 30) + ". "
    tail = "Tail."
    chunks = chunk_text(short + long_sentence + tail, 50)

    assert chunks[0] == short
    assert chunks[-1] == tail
    assert "".join(chunks) == short + long_sentence + tail


def test_long_word_inside_sentence_is_kept_whole():
    text = "tiny " + "z" * 80 + " tail words here."
    chunks = chunk_text(text, 30)
    assert "z" * 80 in [c.strip() for c in chunks]
    assert "".join(chunks) == text


@pytest.mark.parametrize(
    "text",
    [
        "One. Two! Three? Four...",
        "No terminators at all but quite a lot of words to pack in here",
        "  Leading space. Trailing space.   ",
        "Wait?! Really?! Yes. " * 20,
        "Line one.\nLine two.\n\nLine three without end",
    ],
)
def test_chunks_reconstruct_input_and_are_never_empty(text):
    for bound in (5, 12, 40, 1000):
        chunks = chunk_text(text, bound)
        assert "".join(chunks) == text
        assert all(chunks)


def test_split_sentences_keeps_terminator_runs_and_whitespace():
    assert split_sentences("Hi!! How are you? Fine") == ["Hi!! ", "How are you? ", "Fine"]
    assert split_sentences("no boundary") == ["no boundary"]


def test_split_into_chunks_numbers_from_zero():
    text = _sentence(30) * 5
    chunks = split_into_chunks(text, 60)

    assert [c.index for c in chunks] == list(range(len(chunks)))
    assert all(c.length == len(c.content) for c in chunks)


def test_is_deterministic():
    text = "Alpha beta. Gamma delta! " * 50
    assert chunk_text(text, 64) == chunk_text(text, 64)


def test_rejects_non_positive_bound():
    with pytest.raises(ValueError):
        chunk_text("text", 0)
