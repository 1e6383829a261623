"""
treeshelp.services

Service-layer package.

Responsibilities:
- Own transaction boundaries and persistence decisions.
- Call the authorization gate before every mutation of an owned resource.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Services raise `treeshelp.errors` exceptions; the API layer maps them to HTTP statuses.
