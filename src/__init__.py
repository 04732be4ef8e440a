"""
DAO cooperative governance backend.

This package provides the governance client core and the HTTP surface that
exposes its session state and actions to front ends.
"""

__all__ = [
]
