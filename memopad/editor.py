"""Markdown-aware editing of a plain-text buffer.

The functions in this module are pure. They receive the buffer and the
selection as the input control reports them and return the buffer and the
selection the control should show next:

- ``handle_text_change`` continues a ``- `` bullet list when a newline is
  typed at the end of a bullet line, keeping the line's indentation.
- ``handle_tab`` indents (Tab) or outdents (Shift+Tab) the line holding the
  selection start by two spaces.

``EditorSession`` holds the state of one open editor. A new buffer is visible
as soon as an event is handled, while the matching selection update is queued
and only applied by ``flush()``, after the control has taken the new value.
"""

from __future__ import annotations

import logging
import re
from collections import deque
from dataclasses import dataclass, field

logger = logging.getLogger("memopad.editor")

INDENT_UNIT = "  "
BULLET = "- "

_LEADING_WS = re.compile(r"^\s*")


def _clamp(offset: int, length: int) -> int:
    return max(0, min(offset, length))


@dataclass(frozen=True)
class Selection:
    start: int
    end: int

    @classmethod
    def caret(cls, offset: int) -> Selection:
        return cls(offset, offset)

    def clamp(self, length: int) -> Selection:
        start = _clamp(self.start, length)
        end = _clamp(self.end, length)
        return Selection(start, max(start, end))

    def shift(self, delta: int) -> Selection:
        return Selection(self.start + delta, self.end + delta)


@dataclass(frozen=True)
class EditResult:
    text: str
    selection: Selection
    handled: bool = False

    @property
    def cursor(self) -> int:
        return self.selection.start


def line_start(text: str, offset: int) -> int:
    """Offset of the first character of the line containing ``offset``."""
    return text.rfind("\n", 0, offset) + 1


def leading_whitespace(line: str) -> str:
    match = _LEADING_WS.match(line)
    return match.group(0) if match else ""


def handle_text_change(text: str, cursor: int) -> EditResult:
    """Apply list continuation after the control inserted a keystroke.

    ``text`` already contains the raw edit and ``cursor`` is the caret the
    control reports. When the character before the caret is a newline and the
    line it terminates is a ``- `` bullet, the bullet marker and that line's
    indent are inserted at the caret.
    """
    cursor = _clamp(cursor, len(text))
    if cursor == 0 or text[cursor - 1] != "\n":
        return EditResult(text, Selection.caret(cursor))

    before = text[: cursor - 1]
    previous_line = before[line_start(before, len(before)) :]
    # An empty "- " line trims to "-" and ends the list instead of continuing it
    if not previous_line.strip().startswith(BULLET):
        return EditResult(text, Selection.caret(cursor))

    insertion = leading_whitespace(previous_line) + BULLET
    new_text = text[:cursor] + insertion + text[cursor:]
    return EditResult(new_text, Selection.caret(cursor + len(insertion)), handled=True)


def handle_tab(text: str, start: int, end: int | None = None, shift: bool = False) -> EditResult:
    """Indent or outdent the line holding ``start``.

    Text between ``start`` and ``end`` is replaced, as a native control does
    when a key is typed over a selection. Only the line containing ``start``
    is adjusted, even when the selection spans several lines.
    """
    length = len(text)
    start = _clamp(start, length)
    end = start if end is None else _clamp(end, length)
    if end < start:
        start, end = end, start

    begin = line_start(text, start)
    current_line = text[begin:start]
    indent = leading_whitespace(current_line)
    after = text[end:]

    if not shift:
        new_text = text[:begin] + indent + INDENT_UNIT + current_line[len(indent) :] + after
        selection = Selection(start, end).shift(len(INDENT_UNIT))
    else:
        new_indent = indent[: -len(INDENT_UNIT)] if indent.endswith(INDENT_UNIT) else indent
        new_text = text[:begin] + new_indent + current_line[len(indent) :] + after
        selection = Selection(start, end).shift(len(new_indent) - len(indent))

    return EditResult(new_text, selection.clamp(len(new_text)), handled=True)


def handle_key_down(
    text: str,
    start: int,
    end: int | None = None,
    key: str = "Tab",
    shift: bool = False,
) -> EditResult:
    """Dispatch a key press; keys other than Tab keep their default behaviour."""
    if key == "Tab":
        return handle_tab(text, start, end, shift=shift)
    end = start if end is None else end
    return EditResult(text, Selection(start, end).clamp(len(text)))


@dataclass
class EditorSession:
    """One open editor: its buffer, its selection and queued selection updates."""

    text: str = ""
    selection: Selection = field(default_factory=lambda: Selection(0, 0))
    _pending: deque[Selection] = field(default_factory=deque, repr=False)

    @property
    def pending(self) -> int:
        return len(self._pending)

    def select(self, start: int, end: int | None = None) -> Selection:
        self.flush()
        end = start if end is None else end
        self.selection = Selection(start, end).clamp(len(self.text))
        return self.selection

    def change(self, text: str, cursor: int) -> EditResult:
        """Feed a value and caret reported by the control after a raw edit."""
        self.flush()
        return self._apply(handle_text_change(text, cursor))

    def insert(self, chars: str) -> EditResult:
        """Insert ``chars`` over the current selection, as the control would."""
        self.flush()
        start, end = self.selection.start, self.selection.end
        text = self.text[:start] + chars + self.text[end:]
        return self.change(text, start + len(chars))

    def key_down(self, key: str, shift: bool = False) -> EditResult:
        self.flush()
        return self._apply(
            handle_key_down(self.text, self.selection.start, self.selection.end, key, shift)
        )

    def flush(self) -> Selection:
        """Apply queued selection updates in the order they were scheduled."""
        while self._pending:
            self.selection = self._pending.popleft().clamp(len(self.text))
        return self.selection

    def _apply(self, result: EditResult) -> EditResult:
        self.text = result.text
        self._pending.append(result.selection)
        if result.handled:
            logger.debug(
                "Editor rewrote buffer (%d chars), caret -> %d",
                len(result.text),
                result.cursor,
            )
        return result
