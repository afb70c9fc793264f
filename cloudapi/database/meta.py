"""
Meta functionality for the database.
"""

from .account import Account
from .group import Group
from .role import Role

ALL_TABLES = (
    Account,
    Group,
    Role,
)
