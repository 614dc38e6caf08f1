"""
Shared Kernel Module
====================

This module contains shared infrastructure used across all bounded
contexts (Inventory, Service Desk, Identity).

Architecture Pattern: Modular Monolith
- Each module (inventory, service_desk, identity) is a bounded context
- Shared kernel contains only generic infrastructure: logging, response
  envelopes, middleware

DO NOT add inventory or service desk business logic to the shared kernel.
"""

__version__ = "1.0.0"
