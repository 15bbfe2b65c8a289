"""
Top-level package for the Core Template API.

All functionality lives in submodules under ``app``.
"""

__all__ = []
