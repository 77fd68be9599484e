"""
Security primitives shared by the core and the web layer.

Provides:
- Identity: the authenticated caller, valid for one request
"""

from .identity import Identity

__all__ = ["Identity"]
