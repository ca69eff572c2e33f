# kubeSh/core/completion.py
"""
Tab completion for the kubeSh prompt.

The first word completes against command names; later words are delegated to
the completion provider registered by the plugin that owns the command.
Every suggestion list is ranked by the fuzzy matcher.
"""

import logging
from typing import Callable, List, Optional, Sequence

from kubeSh.core.context import KubeShContext
from kubeSh.core.executor import CommandExecutor
from kubeSh.core.fuzzy import match
from kubeSh.core.kubectl import KubectlError

logger = logging.getLogger(__name__)

class ShellCompleter:
    """
    Completion engine, usable as a readline completer through complete().
    """

    def __init__(self, executor: CommandExecutor, context: KubeShContext,
                 builtin_commands: Sequence[str] = (),
                 line_source: Optional[Callable[[], str]] = None):
        self.executor = executor
        self.context = context
        self.builtin_commands = list(builtin_commands)
        # Returns the line text up to the start of the word being completed
        self.line_source = line_source or (lambda: "")
        self._matches: List[str] = []

    def command_names(self) -> List[str]:
        return self.builtin_commands + self.executor.get_supported_commands()

    def candidates(self, line_before_word: str, text: str) -> List[str]:
        """
        Compute suggestions for the word being typed.

        Args:
            line_before_word: Everything on the line before the current word
            text: The partial current word

        Returns:
            Ranked suggestions
        """
        words = line_before_word.rsplit(";", 1)[-1].split()
        if not words:
            return match(text, self.command_names())

        provider = self.executor.plugin_manager.get_completion_provider(words[0])
        if provider is None:
            return []

        try:
            return provider(words[1:], text, self.context)
        except KubectlError as e:
            logger.debug(f"Completion for '{words[0]}' failed: {e}")
            return []

    def complete(self, text: str, state: int) -> Optional[str]:
        """readline completer protocol: return the state-th suggestion or None."""
        if state == 0:
            self._matches = self.candidates(self.line_source(), text)
        if state < len(self._matches):
            return self._matches[state]
        return None
