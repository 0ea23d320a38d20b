"""Split long text into backend-sized chunks at sentence boundaries.

Chunks are exact slices of the input: joining them in order gives back the
original text, whitespace included. Boundaries are preferred at sentence
granularity, then word granularity. Words are never split, so a single word
longer than the bound ends up as one oversized chunk.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

# A sentence runs up to one or more terminators and keeps its trailing whitespace
_SENTENCE_RE = re.compile(r"[^.!?]*[.!?]+\s*")
_WORD_RE = re.compile(r"\s*\S+\s*|\s+")


@dataclass(frozen=True)
class TextChunk:
    index: int
    content: str

    @property
    def length(self) -> int:
        return len(self.content)


def split_sentences(text: str) -> list[str]:
    """Split text into sentence units without dropping any characters."""
    sentences = []
    pos = 0
    for match in _SENTENCE_RE.finditer(text):
        sentences.append(match.group())
        pos = match.end()
    if pos < len(text):
        sentences.append(text[pos:])
    return sentences


def _split_words(sentence: str) -> list[str]:
    return _WORD_RE.findall(sentence) or [sentence]


def _pack(pieces: list[str], max_chars: int, out: list[str]) -> str:
    """Greedily append pieces to a buffer, flushing into ``out`` when the next one would overflow."""
    buffer = ""
    for piece in pieces:
        if buffer and len(buffer) + len(piece) > max_chars:
            out.append(buffer)
            buffer = piece
        else:
            buffer += piece
    return buffer


def chunk_text(text: str, max_chars: int) -> list[str]:
    """Split ``text`` into ordered chunks of at most ``max_chars`` characters."""
    if max_chars <= 0:
        raise ValueError("max_chars must be positive")
    if len(text) <= max_chars:
        return [text]

    chunks: list[str] = []
    buffer = ""
    for sentence in split_sentences(text):
        if len(sentence) > max_chars:
            if buffer:
                chunks.append(buffer)
                buffer = ""
            rest = _pack(_split_words(sentence), max_chars, chunks)
            if rest:
                chunks.append(rest)
            continue

        if buffer and len(buffer) + len(sentence) > max_chars:
            chunks.append(buffer)
            buffer = sentence
        else:
            buffer += sentence

    if buffer:
        chunks.append(buffer)
    return chunks


def split_into_chunks(text: str, max_chars: int) -> list[TextChunk]:
    """Chunk text and number the pieces from zero."""
    return [TextChunk(index=i, content=c) for i, c in enumerate(chunk_text(text, max_chars))]
