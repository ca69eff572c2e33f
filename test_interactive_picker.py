#!/usr/bin/env python3
"""
kubeSh Interactive Picker Tests

Drives the built-in picker with a scripted in-memory terminal, so no real
TTY is needed. Each painted frame is recorded for inspection. AnsiTerminal
is exercised through a pipe standing in for the keyboard.
"""

import io
import os
import random
import sys
import logging
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

# Configure logging for tests
logging.basicConfig(level=logging.WARNING)

from kubeSh.constants import NO_ITEMS_MESSAGE
from kubeSh.core.picker import (
    TerminalIO,
    AnsiTerminal,
    Key,
    InteractivePicker,
    PickerState,
    HighlightStyle,
    pick,
)

class MockTerminal(TerminalIO):
    """Scripted terminal: returns keys from a list and records painted frames"""

    def __init__(self, keys, columns=80, rows=24):
        self.keys = list(keys)
        self.columns = columns
        self.rows = rows
        self.frames = []
        self.written = []
        self._pending = []
        self.cursor_visible = True
        self.hidden_during_session = False

    def read_key(self):
        if not self.keys:
            raise AssertionError("picker asked for more keys than were scripted")
        return self.keys.pop(0)

    def move_cursor_up(self, lines):
        self.frames.append(self._pending)
        self._pending = []

    def write_line(self, text):
        self._pending.append(text)
        self.written.append(text)

    def get_window_size(self):
        return self.columns, self.rows

    def set_cursor_visible(self, visible):
        if not visible:
            self.hidden_during_session = True
        self.cursor_visible = visible

class FailingTerminal(MockTerminal):
    def read_key(self):
        raise OSError("terminal went away")

ITEMS = ["alpha", "beta", "gamma"]

def run_picker(keys, items=ITEMS, current_item=None, columns=80, rows=24):
    terminal = MockTerminal(keys, columns=columns, rows=rows)
    picker = InteractivePicker(terminal=terminal, style=HighlightStyle.plain())
    result = picker.pick(items, "Select an item", current_item)
    return result, terminal

def test_down_then_enter_selects_second_item():
    print("🧪 Testing Down + Enter...")
    result, terminal = run_picker([Key.DOWN, Key.ENTER])

    assert result == "beta"
    assert not terminal.keys
    print("   ✅ Second item selected")

def test_enter_selects_first_item():
    result, _ = run_picker([Key.ENTER])
    assert result == "alpha"

def test_escape_returns_none():
    print("🧪 Testing Escape...")
    result, _ = run_picker(["b", Key.ESCAPE])

    assert result is None
    print("   ✅ Escape cancels the session")

def test_enter_ignored_when_nothing_matches():
    print("🧪 Testing Enter on an empty filtered list...")
    result, terminal = run_picker(["z", "z", "z", Key.ENTER, Key.ESCAPE])

    assert result is None
    # Enter did not end the session, Escape did
    assert not terminal.keys
    assert "0 of 3 items" in terminal.frames[-2]
    print("   ✅ Enter is a no-op with zero matches")

def test_filter_narrows_and_ranks():
    print("🧪 Testing filter typing...")
    result, terminal = run_picker(["g", "a", Key.ENTER])

    assert result == "gamma"
    assert "Filter: ga" in terminal.frames[-2]
    assert "1 of 3 items" in terminal.frames[-2]
    print("   ✅ Filtered list follows the typed text")

def test_backspace_removes_last_filter_character():
    result, terminal = run_picker(["z", Key.BACKSPACE, Key.ENTER])

    assert result == "alpha"
    assert "Filter: " in terminal.frames[-2]
    assert "3 of 3 items" in terminal.frames[-2]

def test_typing_resets_highlight_to_first_row():
    result, _ = run_picker([Key.DOWN, Key.DOWN, "a", Key.ENTER])
    assert result == "alpha"

def test_non_filter_characters_are_ignored():
    result, terminal = run_picker(["/", "~", " ", Key.ENTER])

    assert result == "alpha"
    assert "Filter: " in terminal.frames[-2]

def test_navigation_is_clamped():
    print("🧪 Testing index bounds...")
    result, _ = run_picker([Key.UP, Key.UP, Key.ENTER])
    assert result == "alpha"

    result, _ = run_picker([Key.DOWN] * 10 + [Key.ENTER])
    assert result == "gamma"
    print("   ✅ Up/Down stay inside the list")

def test_empty_items_returns_none_without_prompting():
    print("🧪 Testing empty item list...")
    result, terminal = run_picker([], items=[])

    assert result is None
    assert terminal.written == [NO_ITEMS_MESSAGE]
    assert not terminal.hidden_during_session
    print("   ✅ Empty list is an informational no-op")

def test_frame_layout():
    print("🧪 Testing frame layout...")
    _, terminal = run_picker([Key.ENTER], current_item="beta")
    first_frame = terminal.frames[0]

    # title, filter, top indicator, 15 viewport rows, bottom indicator, footer
    assert len(first_frame) == 20
    assert first_frame[0] == "Select an item"
    assert first_frame[1] == "Filter: "
    assert first_frame[2] == ""
    assert first_frame[3] == "> alpha"
    assert first_frame[4] == "  beta *"
    assert first_frame[5] == "  gamma"
    assert first_frame[6] == ""
    assert first_frame[-1] == "3 of 3 items"
    print("   ✅ Title, filter, rows and footer are rendered")

def test_region_cleared_and_cursor_restored():
    print("🧪 Testing cleanup on exit...")
    _, terminal = run_picker([Key.ESCAPE])

    assert terminal.hidden_during_session
    assert terminal.cursor_visible
    assert len(terminal.frames[-1]) == len(terminal.frames[0])
    assert all(line == "" for line in terminal.frames[-1])
    print("   ✅ Picker region blanked and cursor shown again")

def test_cursor_restored_when_terminal_fails():
    print("🧪 Testing cleanup on terminal error...")
    terminal = FailingTerminal([])
    picker = InteractivePicker(terminal=terminal, style=HighlightStyle.plain())

    try:
        picker.pick(ITEMS, "Select an item")
        raise AssertionError("expected the terminal error to propagate")
    except OSError:
        pass

    assert terminal.cursor_visible
    assert all(line == "" for line in terminal.frames[-1])
    print("   ✅ Errors propagate after the terminal is restored")

def test_scrolling_keeps_highlight_visible():
    print("🧪 Testing viewport scrolling...")
    items = [f"item{i}" for i in range(10)]
    # 8 rows leave a viewport of 3
    result, terminal = run_picker([Key.DOWN] * 5 + [Key.ENTER], items=items, rows=8)

    assert result == "item5"
    frame = terminal.frames[-2]
    assert len(frame) == 8
    assert frame[2] == "  ↑ more"
    assert frame[3:6] == ["  item3", "  item4", "> item5"]
    assert frame[6] == "  ↓ more"
    assert frame[7] == "10 of 10 items"
    print("   ✅ Viewport follows the highlighted row")

def test_tiny_terminal_still_shows_one_row():
    items = ["one", "two"]
    result, terminal = run_picker([Key.DOWN, Key.ENTER], items=items, rows=3)

    assert result == "two"
    assert len(terminal.frames[0]) == 6

def test_long_rows_are_truncated():
    items = ["abcdefghijklmnop"]
    _, terminal = run_picker([Key.ENTER], items=items, columns=10)

    row = terminal.frames[0][3]
    assert row == "> abcdef…"
    assert len(row) == 9

def test_highlight_style_escape_sequences():
    print("🧪 Testing highlight style...")
    style = HighlightStyle()

    assert style.apply("x", highlighted=False, current=False) == "x"
    assert style.apply("x", highlighted=True, current=False) == "\x1b[7mx\x1b[0m"
    assert style.apply("x", highlighted=True, current=True) == "\x1b[1;32;7mx\x1b[0m"
    assert HighlightStyle.plain().apply("x", highlighted=True, current=True) == "x"
    print("   ✅ SGR attributes applied to highlighted and current rows")

def test_picker_state_clamp():
    state = PickerState(highlighted_index=9, scroll_offset=0)
    state.clamp(item_count=4, viewport=2)
    assert state.highlighted_index == 3
    assert state.scroll_offset == 2

    state.clamp(item_count=0, viewport=2)
    assert state.highlighted_index == 0
    assert state.scroll_offset == 0

def test_module_level_pick():
    terminal = MockTerminal([Key.DOWN, Key.DOWN, Key.ENTER])
    assert pick(ITEMS, "Select", terminal=terminal, style=HighlightStyle.plain()) == "gamma"

def test_random_navigation_keeps_highlight_in_range():
    print("🧪 Testing highlight bounds under random input...")
    rng = random.Random(7)
    items = [f"pod-{n}" for n in range(30)] + ["kube-system", "default"]
    choices = [Key.UP, Key.DOWN, Key.DOWN, Key.BACKSPACE, "p", "o", "d", "1", "x", "s"]
    keys = [rng.choice(choices) for _ in range(300)] + [Key.ESCAPE]
    terminal = MockTerminal(keys, rows=10)

    assert InteractivePicker(terminal=terminal, style=HighlightStyle.plain()).pick(items, "Select") is None

    painted = [frame for frame in terminal.frames if frame and frame[-1].endswith(" items")]
    assert len(painted) == len(keys)
    for frame in painted:
        shown = int(frame[-1].split(" of ")[0])
        highlighted = [line for line in frame[3:-2] if line.startswith("> ")]
        # Exactly one visible highlighted row whenever something matches
        assert len(highlighted) == (1 if shown else 0)
    print("   ✅ Highlight stays on a visible row of the filtered list")

# --- AnsiTerminal ---

def open_key_pipe():
    """Terminal reading from a pipe; the write end stays open so reads can time out"""
    read_fd, write_fd = os.pipe()
    terminal = AnsiTerminal(stream=io.StringIO(), input_fd=read_fd)
    return terminal, read_fd, write_fd

def test_ansi_terminal_maps_keys():
    print("🧪 Testing terminal key decoding...")
    terminal, read_fd, write_fd = open_key_pipe()
    try:
        os.write(write_fd, b"\r\n\x7f\x08\x1b[A\x1b[B\x1bOA\x1bOBa" + "é".encode("utf-8"))
        keys = [terminal.read_key() for _ in range(10)]
    finally:
        os.close(read_fd)
        os.close(write_fd)

    assert keys == [Key.ENTER, Key.ENTER, Key.BACKSPACE, Key.BACKSPACE,
                    Key.UP, Key.DOWN, Key.UP, Key.DOWN, "a", "é"]
    print("   ✅ Enter, Backspace, arrows and UTF-8 characters decoded")

def test_ansi_terminal_lone_escape_does_not_wait_for_next_key():
    print("🧪 Testing lone Escape...")
    terminal, read_fd, write_fd = open_key_pipe()
    try:
        os.write(write_fd, b"\x1b")
        assert terminal.read_key() == Key.ESCAPE
        # The next key press is delivered on its own, not swallowed
        os.write(write_fd, b"q")
        assert terminal.read_key() == "q"
    finally:
        os.close(read_fd)
        os.close(write_fd)
    print("   ✅ Escape reported without a following key")

def test_ansi_terminal_reads_whole_unknown_sequences():
    terminal, read_fd, write_fd = open_key_pipe()
    try:
        os.write(write_fd, b"\x1b[5~z")
        assert terminal.read_key() == "\x1b[5~"
        assert terminal.read_key() == "z"
    finally:
        os.close(read_fd)
        os.close(write_fd)

def test_ansi_terminal_closed_input_raises_eof():
    read_fd, write_fd = os.pipe()
    os.close(write_fd)
    try:
        AnsiTerminal(stream=io.StringIO(), input_fd=read_fd).read_key()
        raise AssertionError("expected EOFError")
    except EOFError:
        pass
    finally:
        os.close(read_fd)

def test_ansi_terminal_output_sequences():
    print("🧪 Testing terminal output escapes...")
    stream = io.StringIO()
    terminal = AnsiTerminal(stream=stream)

    terminal.set_cursor_visible(False)
    terminal.write_line("row")
    terminal.move_cursor_up(3)
    terminal.move_cursor_up(0)
    terminal.set_cursor_visible(True)

    assert stream.getvalue() == "\x1b[?25l\x1b[2Krow\n\x1b[3F\r\x1b[?25h"
    print("   ✅ Cursor, clear-line and visibility escapes written")

def test_picker_session_on_ansi_terminal():
    terminal, read_fd, write_fd = open_key_pipe()
    try:
        os.write(write_fd, b"\x1b[B\r")
        result = InteractivePicker(terminal=terminal, style=HighlightStyle.plain()).pick(ITEMS, "Select")
    finally:
        os.close(read_fd)
        os.close(write_fd)

    output = terminal.stream.getvalue()
    assert result == "beta"
    assert output.startswith("\x1b[?25l")
    assert output.endswith("\x1b[?25h")
    assert "\x1b[2K> beta" in output


def run_interactive_picker_tests():
    """Run all picker tests"""
    print("🧪 Testing kubeSh Interactive Picker")
    print("=" * 60)

    tests = [
        test_down_then_enter_selects_second_item,
        test_enter_selects_first_item,
        test_escape_returns_none,
        test_enter_ignored_when_nothing_matches,
        test_filter_narrows_and_ranks,
        test_backspace_removes_last_filter_character,
        test_typing_resets_highlight_to_first_row,
        test_non_filter_characters_are_ignored,
        test_navigation_is_clamped,
        test_empty_items_returns_none_without_prompting,
        test_frame_layout,
        test_region_cleared_and_cursor_restored,
        test_cursor_restored_when_terminal_fails,
        test_scrolling_keeps_highlight_visible,
        test_tiny_terminal_still_shows_one_row,
        test_long_rows_are_truncated,
        test_highlight_style_escape_sequences,
        test_picker_state_clamp,
        test_module_level_pick,
        test_random_navigation_keeps_highlight_in_range,
        test_ansi_terminal_maps_keys,
        test_ansi_terminal_lone_escape_does_not_wait_for_next_key,
        test_ansi_terminal_reads_whole_unknown_sequences,
        test_ansi_terminal_closed_input_raises_eof,
        test_ansi_terminal_output_sequences,
        test_picker_session_on_ansi_terminal,
    ]

    passed = 0
    failed = 0

    for test_func in tests:
        try:
            test_func()
            passed += 1
        except Exception as e:
            print(f"   ❌ Test {test_func.__name__} failed: {type(e).__name__} {e}")
            failed += 1

    print("=" * 60)
    print(f"📊 Interactive Picker Test Results: {passed} passed, {failed} failed")
    return failed == 0

if __name__ == "__main__":
    success = run_interactive_picker_tests()
    sys.exit(0 if success else 1)
