"""
Configuration for plankalink.
"""

from plankalink.config.schemas import AppSettings

__all__ = ["AppSettings"]
