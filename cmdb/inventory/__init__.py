"""
Inventory Module
================

Bounded Context for configuration items and how they relate.

Responsibilities:
- CRUD for configuration items (servers, VMs, databases, network, storage)
- Directed relationships between configuration items
- Topology layout of a CI and its direct neighbours, as JSON or SVG
"""

__version__ = "1.0.0"
