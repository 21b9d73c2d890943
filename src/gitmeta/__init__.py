"""
git-meta: preserve filesystem metadata for files tracked in git.
"""

__version__ = "0.1.0"
