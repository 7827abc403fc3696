"""Connector namespace for upstream API implementations.

Architecture:
    Connectors are organized by upstream: `connectors/<upstream>/rest`.
    Each connector is self-contained with endpoint definitions and adapters
    and acts as the PageSource the collection engine pulls from.
"""

__all__: list[str] = []
