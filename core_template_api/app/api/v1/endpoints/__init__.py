"""
Endpoint subpackage for API v1.

``resources`` builds the CRUD router shared by every resource kind;
the other modules declare one kind's list filters and expose its
``router``.  The routers are aggregated in ``router.py``.
"""
