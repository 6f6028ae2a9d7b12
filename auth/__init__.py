"""
Auth package for the TinyURL API.

Protects operator endpoints (metrics) with HTTP Basic Auth.
Designed to be modular and composable across multiple projects.
"""
