# kubeSh/core/runtime.py
"""
Shared services handed to every plugin at initialization.
"""

from dataclasses import dataclass

from kubeSh.config import ShellConfig
from kubeSh.core.kubectl import KubectlClient
from kubeSh.core.picker import CandidateSelector, HighlightStyle, resolve_selector

@dataclass
class ShellRuntime:
    config: ShellConfig
    kubectl: KubectlClient
    selector: CandidateSelector

    @classmethod
    def from_config(cls, config: ShellConfig) -> "ShellRuntime":
        style = HighlightStyle(highlight_sgr=config.highlight_sgr, current_sgr=config.current_sgr)
        return cls(
            config=config,
            kubectl=KubectlClient(config.kubectl_path, config.kubeconfig),
            selector=resolve_selector(config.picker, config.fzf_path, style=style),
        )
