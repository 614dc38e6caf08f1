"""
Identity Domain Layer
=====================
"""

from cmdb.identity.domain.entities import User
from cmdb.identity.domain.passwords import hash_password, verify_password

__all__ = ["User", "hash_password", "verify_password"]
