"""Marker base for domain services."""


class Service:
    """Domain service.

    Collaborators are injected at construction; request data is always an
    argument, never state.
    """
