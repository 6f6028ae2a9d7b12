"""
Core authentication logic.

This module handles validation of credentials against the operator accounts
configured in `auth.config`.
"""

import logging

from fastapi import HTTPException, status
from .config import USERS
from .utils import passwords_match

log = logging.getLogger(__name__)


def authenticate_user(username: str, password: str) -> str:
    """
    Authenticate an operator by validating their username and password.

    Args:
        username (str): The username provided by the client.
        password (str): The password provided by the client.

    Returns:
        str: The authenticated username.

    Raises:
        HTTPException: If authentication fails (401 Unauthorized).
    """
    stored_password = USERS.get(username)

    if stored_password is None:
        log.info("Rejected credentials for unknown user %r", username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Basic"},
        )

    if passwords_match(stored_password, password):
        return username

    log.info("Rejected password for user %r", username)
    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid password",
        headers={"WWW-Authenticate": "Basic"},
    )
