# kubeSh/core/picker/picker.py
"""
Interactive fuzzy picker.

Renders a filterable, scrollable list in a fixed region of the terminal and
returns the chosen item, or None when the user presses Escape. Filtering runs
through the fuzzy matcher on every keystroke.
"""

import re
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from kubeSh.constants import (
    PICKER_MAX_VIEWPORT,
    PICKER_RESERVED_ROWS,
    PICKER_FILTER_CHARS,
    HIGHLIGHT_SGR,
    CURRENT_SGR,
    NO_ITEMS_MESSAGE,
)
from kubeSh.core.fuzzy import match
from .terminal import TerminalIO, AnsiTerminal, Key

logger = logging.getLogger(__name__)

_FILTER_CHAR = re.compile(PICKER_FILTER_CHARS)

@dataclass
class HighlightStyle:
    """SGR attributes for the highlighted row and the current item"""
    highlight_sgr: str = HIGHLIGHT_SGR
    current_sgr: str = CURRENT_SGR
    enabled: bool = True

    @classmethod
    def plain(cls) -> "HighlightStyle":
        """A style that renders markers only, without escape sequences"""
        return cls(enabled=False)

    def apply(self, text: str, highlighted: bool, current: bool) -> str:
        if not self.enabled:
            return text
        codes = []
        if current:
            codes.append(self.current_sgr)
        if highlighted:
            codes.append(self.highlight_sgr)
        if not codes:
            return text
        return f"\x1b[{';'.join(codes)}m{text}\x1b[0m"

@dataclass
class PickerState:
    """Live state of one picker session"""
    filter_text: str = ""
    highlighted_index: int = 0
    scroll_offset: int = 0
    current_item: Optional[str] = None

    def reset_position(self):
        self.highlighted_index = 0
        self.scroll_offset = 0

    def clamp(self, item_count: int, viewport: int):
        """Keep the highlighted index and scroll offset inside the filtered list"""
        if item_count == 0:
            self.reset_position()
            return
        self.highlighted_index = max(0, min(self.highlighted_index, item_count - 1))
        if self.highlighted_index < self.scroll_offset:
            self.scroll_offset = self.highlighted_index
        elif self.highlighted_index >= self.scroll_offset + viewport:
            self.scroll_offset = self.highlighted_index - viewport + 1
        self.scroll_offset = max(0, min(self.scroll_offset, max(0, item_count - viewport)))

class InteractivePicker:
    """
    Single-threaded selection loop: one blocking key read, then one full repaint.
    """

    def __init__(self, terminal: TerminalIO = None, style: HighlightStyle = None):
        self.terminal = terminal or AnsiTerminal()
        self.style = style or HighlightStyle()

    def _viewport_height(self) -> int:
        _, rows = self.terminal.get_window_size()
        return max(1, min(PICKER_MAX_VIEWPORT, rows - PICKER_RESERVED_ROWS))

    def _fit(self, text: str) -> str:
        columns, _ = self.terminal.get_window_size()
        limit = max(1, columns - 1)
        return text if len(text) <= limit else text[:limit - 1] + "…"

    def _render_lines(self, title: str, state: PickerState, filtered: List[str],
                      total: int, viewport: int) -> List[str]:
        lines = [self._fit(title), self._fit(f"Filter: {state.filter_text}")]

        start = state.scroll_offset
        end = min(len(filtered), start + viewport)
        lines.append("  ↑ more" if start > 0 else "")

        for index in range(start, start + viewport):
            if index >= end:
                lines.append("")
                continue
            item = filtered[index]
            highlighted = index == state.highlighted_index
            current = item == state.current_item
            row = f"{'>' if highlighted else ' '} {item}{' *' if current else ''}"
            lines.append(self.style.apply(self._fit(row), highlighted, current))

        lines.append("  ↓ more" if end < len(filtered) else "")
        lines.append(f"{len(filtered)} of {total} items")
        return lines

    def _paint(self, lines: List[str]):
        for line in lines:
            self.terminal.write_line(line)
        self.terminal.move_cursor_up(len(lines))

    def _clear(self, height: int):
        self._paint([""] * height)

    def _handle_key(self, key: str, state: PickerState, filtered: List[str]) -> bool:
        """
        Apply one key press to the state.

        Returns:
            True when the session reached a terminal state
        """
        if key == Key.ENTER:
            return bool(filtered)
        if key == Key.ESCAPE:
            return True
        if key == Key.UP:
            state.highlighted_index = max(0, state.highlighted_index - 1)
        elif key == Key.DOWN:
            state.highlighted_index = min(max(0, len(filtered) - 1), state.highlighted_index + 1)
        elif key == Key.BACKSPACE:
            state.filter_text = state.filter_text[:-1]
            state.reset_position()
        elif len(key) == 1 and _FILTER_CHAR.fullmatch(key):
            state.filter_text += key
            state.reset_position()
        return False

    def pick(self, items: Sequence[str], title: str, current_item: Optional[str] = None) -> Optional[str]:
        """
        Run a selection session.

        Args:
            items: Candidates to choose from
            title: Header shown above the filter line
            current_item: The active item, rendered distinctly

        Returns:
            The selected item, or None if the user cancelled or there was nothing to pick
        """
        if not items:
            self.terminal.write_line(NO_ITEMS_MESSAGE)
            logger.info(f"Picker '{title}' opened with no items")
            return None

        items = list(items)
        state = PickerState(current_item=current_item)
        region_height = 0
        selected = None

        self.terminal.set_cursor_visible(False)
        try:
            while True:
                filtered = match(state.filter_text, items)
                viewport = self._viewport_height()
                state.clamp(len(filtered), viewport)

                lines = self._render_lines(title, state, filtered, len(items), viewport)
                if region_height > len(lines):
                    # Terminal shrank; blank the rows the previous frame used
                    lines.extend([""] * (region_height - len(lines)))
                region_height = len(lines)
                self._paint(lines)

                key = self.terminal.read_key()
                if self._handle_key(key, state, filtered):
                    if key == Key.ENTER:
                        selected = filtered[state.highlighted_index]
                    break
        finally:
            if region_height:
                self._clear(region_height)
            self.terminal.set_cursor_visible(True)

        logger.debug(f"Picker '{title}' finished with selection: {selected}")
        return selected

def pick(items: Sequence[str], title: str, current_item: Optional[str] = None,
         style: HighlightStyle = None, terminal: TerminalIO = None) -> Optional[str]:
    """Run an interactive picker session and return the chosen item or None."""
    return InteractivePicker(terminal=terminal, style=style).pick(items, title, current_item)
