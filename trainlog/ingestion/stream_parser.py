"""Incremental parser for a large top-level JSON object.

The legacy export is a single JSON object mapping exercise names to arrays
of sessions, far too large to load at once. ``IncrementalObjectParser``
accepts the text in arbitrary chunks and emits each ``(key, value)`` member
as soon as its value is complete, discarding consumed text after every emit.

States:

    SEEKING_KEY ──"key"──> SEEKING_OPEN_BRACKET ──[ or {──> COUNTING_DEPTH
         ^  ^                        │                           │ depth 0
         │  └── , or } ── SKIPPING_SCALAR <── other value        │
         └──────────────────────── EMIT_VALUE <─────────────────┘
    SEEKING_KEY ──}──> DONE

Members whose value is a scalar (null, a number, a string, true/false) are
logged and skipped; only arrays and objects are emitted. Depth counting and
scalar skipping ignore brackets and commas inside JSON strings. Scan
progress survives between ``feed`` calls, so no byte is scanned twice.
"""

from __future__ import annotations

import json
from enum import StrEnum
from typing import Any

from loguru import logger

from trainlog.core.errors import StreamParseError

_WHITESPACE = " \t\r\n"
_OPENERS = "[{"
_CLOSERS = "]}"
_RAW_PREVIEW_CHARS = 500


class ParserState(StrEnum):
    SEEKING_KEY = "seeking_key"
    SEEKING_OPEN_BRACKET = "seeking_open_bracket"
    COUNTING_DEPTH = "counting_depth"
    SKIPPING_SCALAR = "skipping_scalar"
    EMIT_VALUE = "emit_value"
    DONE = "done"


class IncrementalObjectParser:
    """Chunk-fed parser yielding the members of one top-level JSON object."""

    def __init__(self) -> None:
        self._buffer = ""
        self._pos = 0
        self._consumed = 0
        self._state = ParserState.SEEKING_KEY
        self._started = False
        self._colon_seen = False
        self._key: str | None = None
        self._value_start = 0
        self._depth = 0
        self._in_string = False
        self._escaped = False
        self.emitted = 0
        self.skipped = 0

    @property
    def state(self) -> ParserState:
        return self._state

    @property
    def buffered(self) -> int:
        """Characters currently held in the buffer."""
        return len(self._buffer)

    def feed(self, chunk: str) -> list[tuple[str, Any]]:
        """Consume a chunk and return every member completed by it.

        Args:
            chunk: Next slice of the export text

        Returns:
            List of (key, decoded value) pairs, in document order

        Raises:
            StreamParseError: If the text is not a JSON object of members
        """
        self._buffer += chunk
        events: list[tuple[str, Any]] = []
        while self._step(events):
            pass
        self._compact()
        return events

    def close(self) -> None:
        """Check that the stream ended on a complete object.

        Raises:
            StreamParseError: If input ended in the middle of the object
        """
        if self._state == ParserState.DONE:
            return
        if not self._started and not self._buffer.strip():
            logger.warning("Legacy export stream was empty")
            return
        detail = f" while reading {self._key!r}" if self._key else ""
        raise StreamParseError(
            f"Unexpected end of stream in state {self._state}{detail}",
            position=self._consumed + self._pos,
        )

    def _error(self, message: str) -> StreamParseError:
        position = self._consumed + self._pos
        preview = self._buffer[self._pos : self._pos + 40]
        return StreamParseError(f"{message} at offset {position}: {preview!r}", position=position)

    def _skip_whitespace(self) -> bool:
        """Advance past whitespace; False when the buffer is exhausted."""
        buffer = self._buffer
        while self._pos < len(buffer) and buffer[self._pos] in _WHITESPACE:
            self._pos += 1
        return self._pos < len(buffer)

    def _string_end(self, start: int) -> int:
        """Index of the quote closing the string opened at ``start``, or -1."""
        escaped = False
        for i in range(start + 1, len(self._buffer)):
            char = self._buffer[i]
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                return i
        return -1

    def _step(self, events: list[tuple[str, Any]]) -> bool:
        """Run one state transition; False when more input is needed."""
        if self._state == ParserState.SEEKING_KEY:
            return self._seek_key()
        if self._state == ParserState.SEEKING_OPEN_BRACKET:
            return self._seek_open_bracket()
        if self._state == ParserState.COUNTING_DEPTH:
            return self._count_depth()
        if self._state == ParserState.SKIPPING_SCALAR:
            return self._skip_scalar()
        if self._state == ParserState.EMIT_VALUE:
            self._emit(events)
            return True
        # DONE: anything after the closing brace is ignored
        if self._skip_whitespace():
            logger.warning(f"Ignoring trailing data after legacy export object at offset {self._consumed + self._pos}")
            self._pos = len(self._buffer)
        return False

    def _seek_key(self) -> bool:
        if not self._skip_whitespace():
            return False
        char = self._buffer[self._pos]

        if not self._started:
            if char != "{":
                raise self._error("Expected '{' at start of export")
            self._started = True
            self._pos += 1
            return True

        if char == ",":
            self._pos += 1
            return True
        if char == "}":
            self._pos += 1
            self._state = ParserState.DONE
            return True
        if char != '"':
            raise self._error("Expected member name")

        end = self._string_end(self._pos)
        if end == -1:
            return False
        try:
            self._key = json.loads(self._buffer[self._pos : end + 1])
        except json.JSONDecodeError as e:
            raise self._error(f"Malformed member name ({e.msg})") from e
        self._pos = end + 1
        self._colon_seen = False
        self._state = ParserState.SEEKING_OPEN_BRACKET
        return True

    def _seek_open_bracket(self) -> bool:
        if not self._skip_whitespace():
            return False
        char = self._buffer[self._pos]

        if not self._colon_seen:
            if char != ":":
                raise self._error(f"Expected ':' after member {self._key!r}")
            self._colon_seen = True
            self._pos += 1
            return True

        self._value_start = self._pos
        self._in_string = False
        self._escaped = False
        if char not in _OPENERS:
            self._state = ParserState.SKIPPING_SCALAR
            return True
        self._depth = 1
        self._pos += 1
        self._state = ParserState.COUNTING_DEPTH
        return True

    def _count_depth(self) -> bool:
        buffer = self._buffer
        for i in range(self._pos, len(buffer)):
            char = buffer[i]
            if self._in_string:
                if self._escaped:
                    self._escaped = False
                elif char == "\\":
                    self._escaped = True
                elif char == '"':
                    self._in_string = False
            elif char == '"':
                self._in_string = True
            elif char in _OPENERS:
                self._depth += 1
            elif char in _CLOSERS:
                self._depth -= 1
                if self._depth == 0:
                    self._pos = i + 1
                    self._state = ParserState.EMIT_VALUE
                    return True
        self._pos = len(buffer)
        return False

    def _skip_scalar(self) -> bool:
        buffer = self._buffer
        for i in range(self._pos, len(buffer)):
            char = buffer[i]
            if self._in_string:
                if self._escaped:
                    self._escaped = False
                elif char == "\\":
                    self._escaped = True
                elif char == '"':
                    self._in_string = False
            elif char == '"':
                self._in_string = True
            elif char in ",}":
                raw = buffer[self._value_start : i].strip()
                self.skipped += 1
                logger.warning(f"Skipping non-array value for {self._key!r}: {raw[:_RAW_PREVIEW_CHARS]}")
                # The separator is left for SEEKING_KEY
                self._buffer = buffer[i:]
                self._consumed += i
                self._pos = 0
                self._key = None
                self._state = ParserState.SEEKING_KEY
                return True
        self._pos = len(buffer)
        return False

    def _emit(self, events: list[tuple[str, Any]]) -> None:
        raw = self._buffer[self._value_start : self._pos]
        key = self._key or ""
        try:
            value = json.loads(raw)
        except json.JSONDecodeError as e:
            self.skipped += 1
            logger.error(f"Skipping malformed value for {key!r} ({e.msg}): {raw[:_RAW_PREVIEW_CHARS]}")
        else:
            self.emitted += 1
            events.append((key, value))

        # Discard everything up to the end of the emitted value
        self._buffer = self._buffer[self._pos :]
        self._consumed += self._pos
        self._pos = 0
        self._key = None
        self._state = ParserState.SEEKING_KEY

    def _compact(self) -> None:
        """Drop scanned text that no pending value still needs."""
        pending = self._state in (ParserState.COUNTING_DEPTH, ParserState.SKIPPING_SCALAR)
        cut = self._value_start if pending else self._pos
        if cut <= 0:
            return
        self._buffer = self._buffer[cut:]
        self._consumed += cut
        self._pos -= cut
        if pending:
            self._value_start = 0
