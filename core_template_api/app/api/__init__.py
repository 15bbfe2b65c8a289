"""
API package containing versioned routes.

A version subpackage (``v1``) exposes a top-level ``router`` which
includes the routers of every resource kind.
"""
