"""
Utility functions for the auth module.
"""

import hashlib
import re
import secrets

_SHA256_HEX = re.compile(r"[0-9a-fA-F]{64}")


def hash_password(password: str) -> str:
    """
    Return a SHA256 hex digest of the given password.

    Note:
        Lets operators store a digest instead of the plain password in the environment.
        For end-user accounts, use a slow hash such as passlib[bcrypt].
    """
    return hashlib.sha256(password.encode()).hexdigest()


def is_password_digest(stored: str) -> bool:
    return _SHA256_HEX.fullmatch(stored) is not None


def passwords_match(stored: str, supplied: str) -> bool:
    """
    Constant-time check of a supplied password against a stored credential.

    A stored value that looks like a SHA256 hex digest is only ever compared with
    the digest of the supplied password, so the digest itself is not a valid password.
    Any other stored value is compared as a plain password.
    """
    if is_password_digest(stored):
        return secrets.compare_digest(stored.lower().encode(), hash_password(supplied).encode())
    return secrets.compare_digest(stored.encode(), supplied.encode())
