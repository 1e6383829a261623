"""
treeshelp.auth

Authentication/authorization package.

Responsibilities:
- JWT helpers, password hashing and the `Principal` identity type.
- Permission evaluator (role-or-ownership) and the explicit authorization gate.
- FastAPI dependency that resolves the bearer token into a Principal.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# `permissions` has no I/O and no framework imports so it can be tested on its own.
