"""
Permission checks.
"""

from portfolio_api.kernel.permissions.ownership import OWNER_FIELDS, OwnershipPolicy

__all__ = [
    "OWNER_FIELDS",
    "OwnershipPolicy",
]
