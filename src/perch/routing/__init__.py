"""Routing: handler chains, match points, and navigation overrides.

The navigation engine is an external collaborator described by the
protocols in ``perch.routing.engine``.
"""
