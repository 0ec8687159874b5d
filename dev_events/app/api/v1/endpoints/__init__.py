"""
Endpoint subpackage for the JSON API.

Each module defines an APIRouter for one resource; they are
aggregated in ``router.py``.
"""
