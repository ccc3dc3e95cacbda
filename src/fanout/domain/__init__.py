"""Domain layer — identities, value bundles, ledgers, authorization, splitting.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
