# kubeSh/plugins/core/__init__.py
"""
Core plugins shipped with kubeSh.
"""

from .context_plugin import ContextPlugin
from .kubectl_plugin import KubectlPlugin

CORE_PLUGINS = [ContextPlugin, KubectlPlugin]

__all__ = ['ContextPlugin', 'KubectlPlugin', 'CORE_PLUGINS']
