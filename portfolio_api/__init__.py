"""
Portfolio Community API.

Users publish projects and forums, comment on them and like them.
"""

__version__ = "1.0.0"
