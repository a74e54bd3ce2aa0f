"""
rtx
===

Polyglot runtime version manager.
"""

__version__ = "1.35.8"
