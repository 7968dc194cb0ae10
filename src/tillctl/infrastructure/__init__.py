"""Infrastructure layer: flat files, the transaction store, the till.

This layer depends on stdlib, pydantic, and the domain layer.
It must never import from services, commands, or output.
The service layer bridges between the till and its callers.
"""
