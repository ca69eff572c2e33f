# kubeSh/__init__.py
from .__version__ import __version__

__all__ = ['__version__']
