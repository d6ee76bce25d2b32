"""Operation modules, one per host area.

Each module exposes ``QUERIES``: the tuple of its :class:`QueryDefinition`
objects, collected into the fixed catalog by :mod:`foundry_bridge.queries.catalog`.
"""
