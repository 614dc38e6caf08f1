"""
CMDB Service
============

Configuration management database with a service desk, built as a
modular monolith. See ``cmdb.main`` for the FastAPI application.
"""

__version__ = "1.0.0"
