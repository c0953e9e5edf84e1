"""
LLM price catalog.

Keeps model prices in sync with an upstream feed and projects usage costs.
"""

__version__ = "0.1.0"
