# kubeSh/plugins/core/kubectl_plugin.py
"""
Kubectl Plugin for kubeSh

Forwards `k` / `kubectl` and the shorthand commands (kgp, kd, kl, ...) to
kubectl with the session namespace applied, and completes verbs, resource
kinds, resource names and namespaces.
"""

from typing import Dict, List, Callable
import logging

from kubeSh.constants import (
    KUBECTL_VERBS,
    RESOURCE_VERBS,
    RESOURCE_KINDS,
    RESOURCE_ALIASES,
    NAMESPACE_FLAGS,
)
from kubeSh.core.plugin_system.plugin_interface import ShellPlugin, PluginMetadata
from kubeSh.core.context import KubeShContext
from kubeSh.core.fuzzy import match

logger = logging.getLogger(__name__)

# Flags whose next word is a value, not a positional argument
VALUE_FLAGS = {"-n", "--namespace", "--context", "-o", "--output", "-l", "--selector", "-f", "--filename", "-c", "--container"}
# Verbs whose first positional argument names a pod
POD_VERBS = {"logs", "exec", "port-forward", "attach", "cp"}

def positional_args(args: List[str]) -> List[str]:
    """Arguments that are neither flags nor flag values."""
    positional = []
    skip_next = False
    for arg in args:
        if skip_next:
            skip_next = False
            continue
        if arg.startswith("-"):
            skip_next = arg in VALUE_FLAGS
            continue
        positional.append(arg)
    return positional

def namespace_from_args(args: List[str], default: str) -> str:
    for index, arg in enumerate(args):
        if arg in NAMESPACE_FLAGS and index + 1 < len(args):
            return args[index + 1]
        if arg.startswith("--namespace="):
            return arg.split("=", 1)[1]
    return default

class KubectlPlugin(ShellPlugin):
    """
    Plugin for kubectl pass-through and shorthand commands.
    """

    def __init__(self):
        super().__init__()
        self._shortcuts: Dict[str, List[str]] = {}

    @property
    def metadata(self) -> PluginMetadata:
        """Plugin metadata"""
        return PluginMetadata(
            name="KubectlPlugin",
            version="1.0.0",
            description="kubectl pass-through with namespace injection and shorthand commands",
            author="kubeSh Team",
            dependencies=["ContextPlugin"]
        )

    def initialize(self, runtime=None) -> bool:
        super().initialize(runtime)
        if runtime is not None:
            self._shortcuts = dict(runtime.config.shortcuts)
        return True

    def get_command_handlers(self) -> Dict[str, Callable]:
        handlers = {
            "k": self._handle_kubectl,
            "kubectl": self._handle_kubectl,
        }
        for name, prefix in self._shortcuts.items():
            handlers[name] = self._shortcut_handler(prefix)
        return handlers

    def get_completion_providers(self) -> Dict[str, Callable]:
        providers = {
            "k": self._complete_kubectl,
            "kubectl": self._complete_kubectl,
        }
        for name, prefix in self._shortcuts.items():
            providers[name] = self._shortcut_completer(prefix)
        return providers

    def get_help(self) -> Dict[str, str]:
        entries = {
            "k": "k <args>         run kubectl in the session namespace",
            "kubectl": "kubectl <args>   same as k",
        }
        for name, prefix in self._shortcuts.items():
            entries[name] = f"{name:<16} kubectl {' '.join(prefix)}"
        return entries

    def _shortcut_handler(self, prefix: List[str]) -> Callable:
        def handler(args: List[str], context: KubeShContext):
            self._handle_kubectl(prefix + args, context)
        return handler

    def _shortcut_completer(self, prefix: List[str]) -> Callable:
        def completer(args: List[str], text: str, context: KubeShContext) -> List[str]:
            return self._complete_kubectl(prefix + args, text, context)
        return completer

    def _handle_kubectl(self, args: List[str], context: KubeShContext):
        """Handle kubectl pass-through"""
        returncode = self.runtime.kubectl.run(args, context)
        if returncode != 0:
            logger.debug(f"kubectl {' '.join(args)} exited with status {returncode}")

    def _complete_kubectl(self, args: List[str], text: str, context: KubeShContext) -> List[str]:
        kubectl = self.runtime.kubectl

        if args and args[-1] in NAMESPACE_FLAGS:
            return match(text, kubectl.list_namespaces())
        if args and args[-1] == "--context":
            names, _ = kubectl.list_contexts()
            return match(text, names)
        if args and args[-1] in VALUE_FLAGS:
            return []

        positional = positional_args(args)
        if not positional:
            return match(text, KUBECTL_VERBS)

        verb = positional[0]
        namespace = namespace_from_args(args, context.current_namespace)

        if verb in RESOURCE_VERBS:
            if len(positional) == 1:
                return match(text, RESOURCE_KINDS + list(RESOURCE_ALIASES))
            if len(positional) == 2 and "," not in positional[1]:
                kind = RESOURCE_ALIASES.get(positional[1], positional[1])
                return match(text, kubectl.list_resource_names(kind, namespace))
        elif verb in POD_VERBS and len(positional) == 1:
            return match(text, kubectl.list_resource_names("pods", namespace))

        return []
