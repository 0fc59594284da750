"""
Notetree - notebook hierarchy and revision comparison for Markdown notes.
"""

__version__ = "0.1.0"
