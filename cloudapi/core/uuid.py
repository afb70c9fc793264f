"""
UUID creation for directory entries. uuid7 is not part of the python standard
library as of 3.12.
"""

from uuid import UUID as UUID

from uuid_extensions import uuid7 as uuid7

__ALL__ = ["UUID", "uuid7", "new_id"]


def new_id() -> str:
    """
    A fresh identifier for a directory entry, in its string form (the directory
    stores and returns identifiers as plain strings).
    """
    return str(uuid7())
