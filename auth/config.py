"""
Configuration for the auth module.

This defines how operator accounts are loaded. Accounts live in an in-memory
dictionary seeded from the environment.
In production, this can be extended to load users from a database or external service.
"""

from typing import Dict
import os

# Operator accounts (username -> password or SHA-256 hex digest of the password)
USERS: Dict[str, str] = {
    os.getenv("TINYURL_ADMIN_USER", "tinyurl_admin"): os.getenv("TINYURL_ADMIN_PASSWORD", "tinyurl_admin"),
}
