# kubeSh/core/context/session_context.py
"""
Manages the current operational context (kube context and namespace) for a kubeSh session.
An instance of KubeShContext is created by the main shell and passed to every command handler.
"""
from typing import Optional

from kubeSh.constants import DEFAULT_NAMESPACE, DEFAULT_PROMPT_TEMPLATE, CONTINUATION_PROMPT, NO_CONTEXT_LABEL

class KubeShContext:
    def __init__(self, kube_context: Optional[str] = None, namespace: Optional[str] = None,
                 prompt_template: str = DEFAULT_PROMPT_TEMPLATE):
        self.kube_context: Optional[str] = kube_context
        # current_namespace is injected into every kubectl call made by the session
        self.current_namespace: str = namespace or DEFAULT_NAMESPACE
        self.previous_context: Optional[str] = None
        self.previous_namespace: Optional[str] = None
        self.prompt_template = prompt_template

    def set_kube_context(self, kube_context: str, namespace: Optional[str] = None):
        """Switch to another kube context. The namespace falls back to the context's default."""
        if kube_context != self.kube_context:
            self.previous_context = self.kube_context
            self.previous_namespace = None
        self.kube_context = kube_context
        self.current_namespace = namespace or DEFAULT_NAMESPACE

    def set_namespace(self, namespace: str):
        """Sets the namespace for subsequent commands, remembering the previous one."""
        if namespace != self.current_namespace:
            self.previous_namespace = self.current_namespace
        self.current_namespace = namespace

    def get_prompt(self) -> str:
        """Returns the current command prompt string."""
        return self.prompt_template.format(
            context=self.kube_context or NO_CONTEXT_LABEL,
            namespace=self.current_namespace,
        )

    def get_continuation_prompt(self) -> str:
        """Returns the continuation prompt string for a line ending in a backslash."""
        return CONTINUATION_PROMPT

    def __str__(self):
        return f"Current Context: Context='{self.kube_context or NO_CONTEXT_LABEL}', Namespace='{self.current_namespace}'"
