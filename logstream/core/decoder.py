"""Incremental bytes-to-lines decoding for streamed log bodies."""

from __future__ import annotations

import codecs

from .errors import DecodeError, DecoderClosedError

LINE_TERMINATOR = "\n"
DECODE_POLICIES = ("strict", "replace")


class LineDecoder:
    """Turn a sequence of byte chunks into complete text lines.

    Chunks may split both lines and multi-byte codepoints. Incomplete
    codepoints are carried inside the incremental decoder and incomplete
    lines are carried in ``pending_line`` until their terminator arrives.

    With ``errors="strict"`` (the default) an invalid byte sequence raises
    :class:`DecodeError`. With ``errors="replace"`` invalid sequences become
    U+FFFD; a codepoint that is merely incomplete at a chunk boundary is never
    replaced under either policy.

    Usage::

        decoder = LineDecoder()
        for chunk in chunks:
            for line in decoder.feed(chunk):
                handle(line)
        tail = decoder.flush()
        if tail is not None:
            handle(tail)
    """

    def __init__(self, encoding: str = "utf-8", errors: str = "strict") -> None:
        if errors not in DECODE_POLICIES:
            raise ValueError(
                f"Unknown decode policy '{errors}'. Allowed values: {', '.join(DECODE_POLICIES)}."
            )
        self.errors = errors
        self._decoder = codecs.getincrementaldecoder(encoding)(errors=errors)
        self._pending_line = ""
        self._flushed = False

    @property
    def pending_line(self) -> str:
        """Unterminated text seen so far (empty after a terminator)."""
        return self._pending_line

    @property
    def flushed(self) -> bool:
        return self._flushed

    def feed(self, chunk: bytes) -> list[str]:
        """Decode one chunk and return the lines it completed, in order."""
        if self._flushed:
            raise DecoderClosedError("feed")
        if not chunk:
            return []

        text = self._decode(chunk, final=False)
        if not text:
            return []

        parts = (self._pending_line + text).split(LINE_TERMINATOR)
        # Last segment has not seen its terminator yet ("" when text ended with one)
        self._pending_line = parts.pop()
        return parts

    def flush(self) -> str | None:
        """Finish decoding at end of stream and return the unterminated remainder."""
        if self._flushed:
            raise DecoderClosedError("flush")
        self._flushed = True

        remainder = self._pending_line + self._decode(b"", final=True)
        self._pending_line = ""
        return remainder or None

    def _decode(self, data: bytes, *, final: bool) -> str:
        try:
            return self._decoder.decode(data, final)
        except UnicodeDecodeError as exc:
            raise DecodeError(f"Invalid {exc.encoding} byte sequence: {exc.reason}") from exc
