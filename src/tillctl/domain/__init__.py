"""Domain layer: catalog, cart, pricing, transactions and their rules.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
