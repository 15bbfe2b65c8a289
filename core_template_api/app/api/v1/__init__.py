"""
Version 1 of the API.

Every resource kind is served under ``/api/v1/<kind path>``.
"""
