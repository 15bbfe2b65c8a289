"""
Pydantic schema definitions for API payloads.

Each resource kind defines its own create, update and read models on
top of the shared bases in ``common``.  Schemas are separated from the
storage layer, which works with plain dictionaries.
"""
