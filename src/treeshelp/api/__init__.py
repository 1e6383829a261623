"""
treeshelp.api

API package for the Trees Help backend.

Responsibilities:
- FastAPI app factory and router modules.
- API-layer dependency wiring, request/response models and error mapping.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The API layer stays thin: request validation + authentication + delegation to services.
