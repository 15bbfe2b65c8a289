"""
Service layer.

The storage (``store``), query (``query``) and service
(``resource_service``) layers are generic; ``kinds`` declares the four
resource kinds and ``registry`` wires one service per kind.  API
handlers only ever talk to ``ResourceService`` instances.
"""
