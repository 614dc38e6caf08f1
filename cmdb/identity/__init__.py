"""
Identity Module
===============

Operator accounts. Only the data-access layer exists; no routes are
exposed.
"""

__version__ = "1.0.0"
