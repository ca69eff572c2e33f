# kubeSh/core/picker/selectors.py
"""
Candidate selectors.

A selector turns a list of candidates into a single choice. Two implementations
satisfy the same contract: the built-in interactive picker and the external
fzf line finder. resolve_selector() probes for fzf and picks one.
"""

import shutil
import subprocess
import logging
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from kubeSh.constants import (
    CURRENT_MARKER,
    DEFAULT_FZF,
    NO_ITEMS_MESSAGE,
    PICKER_AUTO,
    PICKER_BUILTIN,
    PICKER_FZF,
)
from .picker import InteractivePicker, HighlightStyle
from .terminal import TerminalIO

logger = logging.getLogger(__name__)

class CandidateSelector(ABC):
    """Interface shared by every selection backend"""

    name = "selector"

    @abstractmethod
    def select(self, items: Sequence[str], title: str, current_item: Optional[str] = None) -> Optional[str]:
        """
        Let the user choose one of `items`.

        Args:
            items: Candidates to choose from
            title: Header describing the choice
            current_item: The active item, if any

        Returns:
            The chosen item, or None on cancellation or empty input
        """
        pass

class BuiltinSelector(CandidateSelector):
    """Selector backed by the built-in InteractivePicker"""

    name = PICKER_BUILTIN

    def __init__(self, terminal: TerminalIO = None, style: HighlightStyle = None):
        self.picker = InteractivePicker(terminal=terminal, style=style)

    def select(self, items: Sequence[str], title: str, current_item: Optional[str] = None) -> Optional[str]:
        return self.picker.pick(items, title, current_item)

class FzfSelector(CandidateSelector):
    """
    Selector that delegates to the external fzf tool.

    The current item is suffixed with CURRENT_MARKER on the way in and the
    marker is stripped from the chosen line on the way out.
    """

    name = PICKER_FZF

    def __init__(self, fzf_path: str = DEFAULT_FZF):
        self.fzf_path = fzf_path

    def _annotate(self, items: Sequence[str], current_item: Optional[str]) -> List[str]:
        return [f"{item}{CURRENT_MARKER}" if item == current_item else item for item in items]

    @staticmethod
    def strip_marker(line: str) -> str:
        if line.endswith(CURRENT_MARKER):
            return line[:-len(CURRENT_MARKER)]
        return line

    def select(self, items: Sequence[str], title: str, current_item: Optional[str] = None) -> Optional[str]:
        if not items:
            print(NO_ITEMS_MESSAGE)
            return None

        lines = self._annotate(items, current_item)
        command = [self.fzf_path, "--header", title, "--height", "40%", "--reverse"]
        logger.debug(f"Running fzf: {command}")

        # fzf draws on /dev/tty, only stdin and stdout are piped
        result = subprocess.run(command, input="\n".join(lines), stdout=subprocess.PIPE, text=True, check=False)
        chosen = result.stdout.rstrip("\n")
        if result.returncode != 0 or not chosen:
            logger.debug(f"fzf exited with status {result.returncode}, no selection")
            return None
        return self.strip_marker(chosen)

def fzf_available(fzf_path: str = DEFAULT_FZF) -> bool:
    """Check whether the fzf executable can be found"""
    return shutil.which(fzf_path) is not None

def resolve_selector(mode: str = PICKER_AUTO, fzf_path: str = DEFAULT_FZF,
                     terminal: TerminalIO = None, style: HighlightStyle = None) -> CandidateSelector:
    """
    Choose the selection backend.

    Args:
        mode: "auto" uses fzf when installed, "fzf" requests it, "builtin" never uses it
        fzf_path: Name or path of the fzf executable
        terminal: Terminal used by the built-in picker
        style: Highlight style used by the built-in picker

    Returns:
        A CandidateSelector implementation
    """
    if mode != PICKER_BUILTIN and fzf_available(fzf_path):
        logger.info(f"Using fzf selector ({fzf_path})")
        return FzfSelector(fzf_path)

    if mode == PICKER_FZF:
        logger.warning(f"fzf requested but '{fzf_path}' was not found, using the built-in picker")
    return BuiltinSelector(terminal=terminal, style=style)
