# carit/dependencies.py
"""
Request identity. Token validation happens upstream (API gateway / auth middleware);
the resolved subject arrives in the `userid` header.
"""

from typing import Optional

from fastapi import Header

from carit.exceptions import UnauthorizedError


def get_user_id(userid: Optional[str] = Header(None)) -> str:
    """FastAPI dependency: the caller's user id, 401 when absent."""
    if not userid or not userid.strip():
        raise UnauthorizedError()
    return userid.strip()
