"""Tests for incremental byte-to-line decoding."""

from __future__ import annotations

import random

import pytest

from logstream.core.decoder import LineDecoder
from logstream.core.errors import DecodeError, DecoderClosedError


def _decode_all(chunks: list[bytes], **kwargs) -> list[str]:
    decoder = LineDecoder(**kwargs)
    lines: list[str] = []
    for chunk in chunks:
        lines.extend(decoder.feed(chunk))
    tail = decoder.flush()
    if tail is not None:
        lines.append(tail)
    return lines


def test_partial_lines_are_joined_across_chunks():
    decoder = LineDecoder()

    assert decoder.feed(b"foo\nba") == ["foo"]
    assert decoder.pending_line == "ba"
    assert decoder.feed(b"r\nbaz") == ["bar"]
    assert decoder.pending_line == "baz"
    assert decoder.flush() == "baz"


def test_consecutive_terminators_emit_blank_lines():
    decoder = LineDecoder()

    assert decoder.feed(b"\n\n") == ["", ""]
    assert decoder.pending_line == ""


def test_lone_terminator_completes_pending_line():
    decoder = LineDecoder()
    decoder.feed(b"started")

    assert decoder.feed(b"\n") == ["started"]
    assert decoder.pending_line == ""
    assert decoder.feed(b"\n") == [""]


def test_empty_chunk_changes_nothing():
    decoder = LineDecoder()
    decoder.feed(b"partial")

    assert decoder.feed(b"") == []
    assert decoder.pending_line == "partial"
    assert decoder.feed(b" line\n") == ["partial line"]


def test_line_is_not_emitted_before_its_terminator():
    decoder = LineDecoder()

    assert decoder.feed(b"no terminator yet") == []
    assert decoder.feed(b" still none") == []
    assert decoder.pending_line == "no terminator yet still none"


@pytest.mark.parametrize("split", [1, 2, 3])
def test_codepoint_split_at_chunk_boundary(split: int):
    # "€" is three bytes in UTF-8
    payload = "price: 5€\n".encode("utf-8")
    cut = payload.index(b"\xe2") + split

    decoder = LineDecoder()
    first = decoder.feed(payload[:cut])
    second = decoder.feed(payload[cut:])

    assert first == []
    assert second == ["price: 5€"]
    assert "�" not in decoder.pending_line


def test_four_byte_codepoint_fed_one_byte_at_a_time():
    payload = "deploy 🚀 done\n".encode("utf-8")
    decoder = LineDecoder()
    lines: list[str] = []
    for byte in payload:
        lines.extend(decoder.feed(bytes([byte])))

    assert lines == ["deploy 🚀 done"]


def test_any_partition_reproduces_the_original_lines():
    lines = ["héllo wörld", "", "日本語のログ", "emoji 🐳 container", "plain ascii"]
    payload = "\n".join(lines).encode("utf-8")  # no trailing terminator
    rng = random.Random(1234)

    for _ in range(50):
        cuts = sorted(rng.sample(range(1, len(payload)), rng.randint(1, 12)))
        bounds = [0, *cuts, len(payload)]
        chunks = [payload[a:b] for a, b in zip(bounds, bounds[1:])]

        assert _decode_all(chunks) == lines


def test_flush_returns_none_when_nothing_pending():
    decoder = LineDecoder()
    decoder.feed(b"complete\n")

    assert decoder.flush() is None


def test_feed_after_flush_fails_fast():
    decoder = LineDecoder()
    decoder.flush()

    with pytest.raises(DecoderClosedError):
        decoder.feed(b"late\n")
    with pytest.raises(DecoderClosedError):
        decoder.flush()


def test_strict_policy_rejects_invalid_bytes():
    decoder = LineDecoder()

    with pytest.raises(DecodeError):
        decoder.feed(b"bad \xff byte\n")


def test_strict_policy_rejects_truncated_codepoint_at_end_of_stream():
    decoder = LineDecoder()
    assert decoder.feed(b"cut \xe2\x82") == []

    with pytest.raises(DecodeError):
        decoder.flush()


def test_replace_policy_substitutes_only_invalid_sequences():
    decoder = LineDecoder(errors="replace")

    assert decoder.feed(b"bad \xff byte\n") == ["bad � byte"]
    # Incomplete codepoint is carried, not replaced
    assert decoder.feed(b"ok \xe2\x82") == []
    assert decoder.feed(b"\xac\n") == ["ok €"]


def test_unknown_policy_is_rejected():
    with pytest.raises(ValueError, match="decode policy"):
        LineDecoder(errors="ignore")
