# kubeSh/core/plugin_system/plugin_interface.py
"""
The contract between the shell and its plugins.

A plugin contributes shell commands. For each command it may also offer a
completion provider and a help line. Built-in commands such as `ctx`, `ns`,
`k` and the kubectl shortcuts are plugins too.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Any, Callable, Optional
from dataclasses import dataclass, field

# handler(args, context)
CommandHandler = Callable[[List[str], Any], None]
# provider(args_before_word, incomplete_word, context) -> suggestions
CompletionProvider = Callable[[List[str], str, Any], List[str]]

@dataclass
class PluginMetadata:
    name: str
    version: str
    description: str
    author: str = ""
    # class names of plugins that must be loaded first
    dependencies: List[str] = field(default_factory=list)

    def __post_init__(self):
        if self.dependencies is None:
            self.dependencies = []

class ShellPlugin(ABC):
    """
    Base class for kubeSh plugins.

    Subclasses provide `metadata` and `get_command_handlers()`. The runtime
    (kubectl client, selector, config) is attached in `initialize()`, before
    any handler runs.
    """

    def __init__(self):
        self._runtime = None
        self._initialized = False

    @property
    @abstractmethod
    def metadata(self) -> PluginMetadata:
        pass

    @abstractmethod
    def get_command_handlers(self) -> Dict[str, CommandHandler]:
        """
        Commands provided by this plugin.

        Returns:
            Dict of command name to handler, e.g. {"ctx": self._handle_ctx}
        """
        pass

    def get_completion_providers(self) -> Dict[str, CompletionProvider]:
        """Completion providers keyed by command name. None by default."""
        return {}

    def get_help(self) -> Dict[str, str]:
        """Help line per command name."""
        return {}

    def initialize(self, runtime: Any = None) -> bool:
        """
        Attach the shell runtime. Overrides should call super() first.

        Returns:
            False to abort loading this plugin
        """
        self._runtime = runtime
        self._initialized = True
        return True

    def cleanup(self) -> bool:
        """Release resources before the plugin is unloaded."""
        self._initialized = False
        return True

    @property
    def runtime(self) -> Optional[Any]:
        return self._runtime

    @property
    def is_initialized(self) -> bool:
        return self._initialized
