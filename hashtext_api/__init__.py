"""
HashText API - exchange text for its SHA-256 hash and back.

Provides REST endpoints for:
- Looking up the calling user (GET /user/me)
- Submitting text, paid for with one credit (POST /text)
- Looking up text by hash (GET /text/{hash})
"""

__version__ = "0.1.0"
