# kubeSh/plugins/core/context_plugin.py
"""
Context Plugin for kubeSh

Provides the `ctx` and `ns` commands: switching the kube context and the
session namespace, either by name (fuzzy-resolved) or through the
interactive selector.
"""

from typing import Dict, List, Optional, Callable
import logging

from tabulate import tabulate

from kubeSh.constants import PREVIOUS_SELECTION, LIST_FLAG
from kubeSh.core.plugin_system.plugin_interface import ShellPlugin, PluginMetadata
from kubeSh.core.context import KubeShContext
from kubeSh.core.fuzzy import match
from kubeSh.core.kubectl import KubectlError

logger = logging.getLogger(__name__)

class ContextPlugin(ShellPlugin):
    """
    Plugin for kube context and namespace switching.
    """

    @property
    def metadata(self) -> PluginMetadata:
        """Plugin metadata"""
        return PluginMetadata(
            name="ContextPlugin",
            version="1.0.0",
            description="Context and namespace switching with fuzzy selection",
            author="kubeSh Team",
            dependencies=[]
        )

    def get_command_handlers(self) -> Dict[str, Callable]:
        return {
            "ctx": self._handle_ctx,
            "ns": self._handle_ns,
        }

    def get_completion_providers(self) -> Dict[str, Callable]:
        return {
            "ctx": self._complete_ctx,
            "ns": self._complete_ns,
        }

    def get_help(self) -> Dict[str, str]:
        return {
            "ctx": "ctx [name|-|-l]  switch kube context (no argument opens the picker)",
            "ns": "ns [name|-|-l]   switch session namespace (no argument opens the picker)",
        }

    def _resolve(self, query: str, names: List[str], title: str, current: Optional[str]) -> Optional[str]:
        """
        Turn a typed name into a candidate.

        An exact name wins; a single fuzzy match is taken directly; several
        matches open the selector over just those matches.
        """
        if query in names:
            return query

        matches = match(query, names)
        if not matches:
            print(f"❌ Nothing matches '{query}'.")
            return None
        if len(matches) == 1:
            return matches[0]
        return self.runtime.selector.select(matches, title, current)

    # --- ctx ---
    def _handle_ctx(self, args: List[str], context: KubeShContext):
        """Handle ctx commands"""
        kubectl = self.runtime.kubectl
        names, active = kubectl.list_contexts()
        title = "Select a Kubernetes context"

        if args and args[0] == LIST_FLAG:
            self._print_contexts(names, active)
            return

        if not args:
            target = self.runtime.selector.select(names, title, active)
        elif args[0] == PREVIOUS_SELECTION:
            target = context.previous_context
            if not target:
                print("⚠️ No previous context to switch back to.")
                return
        else:
            target = self._resolve(args[0], names, title, active)

        if not target:
            print("ℹ️ Context unchanged.")
            return

        kubectl.use_context(target)
        context.set_kube_context(target, kubectl.context_namespace(target))
        print(f"✅ Switched to context '{target}' (namespace '{context.current_namespace}').")

    def _print_contexts(self, names: List[str], active: Optional[str]):
        if not names:
            print("ℹ️ No contexts found in kubeconfig.")
            return
        kubectl = self.runtime.kubectl
        table_data = [
            ["*" if name == active else "", name, kubectl.context_namespace(name) or ""]
            for name in names
        ]
        print(tabulate(table_data, headers=["Current", "Context", "Namespace"], tablefmt="grid"))

    def _complete_ctx(self, args: List[str], text: str, context: KubeShContext) -> List[str]:
        if args:
            return []
        names, _ = self.runtime.kubectl.list_contexts()
        return match(text, names)

    # --- ns ---
    def _handle_ns(self, args: List[str], context: KubeShContext):
        """Handle ns commands"""
        kubectl = self.runtime.kubectl
        title = f"Select a namespace ({context.kube_context or 'current context'})"

        if args and args[0] == PREVIOUS_SELECTION:
            target = context.previous_namespace
            if not target:
                print("⚠️ No previous namespace to switch back to.")
                return
            self._switch_namespace(target, context)
            return

        try:
            names = kubectl.list_namespaces()
        except KubectlError as e:
            if not args or args[0] == LIST_FLAG:
                raise
            # Listing may be forbidden by RBAC while the namespace itself is usable
            logger.warning(f"Could not list namespaces: {e}")
            print(f"⚠️ Could not list namespaces, using '{args[0]}' as given.")
            self._switch_namespace(args[0], context)
            return

        if args and args[0] == LIST_FLAG:
            table_data = [["*" if name == context.current_namespace else "", name] for name in names]
            print(tabulate(table_data, headers=["Current", "Namespace"], tablefmt="grid"))
            return

        if not args:
            target = self.runtime.selector.select(names, title, context.current_namespace)
        else:
            target = self._resolve(args[0], names, title, context.current_namespace)

        if not target:
            print("ℹ️ Namespace unchanged.")
            return
        self._switch_namespace(target, context)

    def _switch_namespace(self, namespace: str, context: KubeShContext):
        context.set_namespace(namespace)
        if self.runtime.config.persist_namespace:
            self.runtime.kubectl.persist_namespace(namespace)
        print(f"✅ Namespace set to '{namespace}'.")

    def _complete_ns(self, args: List[str], text: str, context: KubeShContext) -> List[str]:
        if args:
            return []
        return match(text, self.runtime.kubectl.list_namespaces())
