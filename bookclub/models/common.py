"""Shared field types"""

from typing import Annotated, Literal

from pydantic import StringConstraints

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
Category = Literal["fiction", "non-fiction"]
Role = Literal["member", "admin", "super_admin"]


def reject_null(value):
    """Before-validator for update fields that may be omitted but not cleared"""
    if value is None:
        raise ValueError("cannot be null")
    return value
