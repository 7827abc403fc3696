"""Brex REST connector and endpoint definitions."""

from .provider import BrexRESTConnector

__all__ = ["BrexRESTConnector"]
