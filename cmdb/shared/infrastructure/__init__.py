"""
Shared Infrastructure Layer
===========================

Low-level technical concerns:
- Structured JSON logging
- Correlation id propagation
"""
