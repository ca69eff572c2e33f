# kubeSh/core/picker/__init__.py
"""
kubeSh Core Picker Module

Interactive selection: terminal capability, the built-in picker and the
selector backends.
"""

from .terminal import TerminalIO, AnsiTerminal, Key
from .picker import InteractivePicker, PickerState, HighlightStyle, pick
from .selectors import CandidateSelector, BuiltinSelector, FzfSelector, resolve_selector

__all__ = [
    'TerminalIO',
    'AnsiTerminal',
    'Key',
    'InteractivePicker',
    'PickerState',
    'HighlightStyle',
    'pick',
    'CandidateSelector',
    'BuiltinSelector',
    'FzfSelector',
    'resolve_selector'
]
