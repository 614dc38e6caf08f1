"""
Shared API Layer
================

Response envelopes, middleware and exception handlers used by every
module's routes.
"""
