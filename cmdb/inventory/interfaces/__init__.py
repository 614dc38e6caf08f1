"""
Inventory Interfaces Layer
==========================

HTTP routes and SVG rendering for configuration items and topology.
"""

from cmdb.inventory.interfaces.controllers import inventory_router

__all__ = ["inventory_router"]
