"""Domain layer: users, roles, and host document vocabulary.

This layer depends only on stdlib and pydantic.
It must never import from queries, host, commands, or config.
"""
