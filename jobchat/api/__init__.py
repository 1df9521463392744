"""HTTP surface of the jobchat service."""

from .app import create_app, record_exchange
from .dependencies import AppServices, get_services

__all__ = ["AppServices", "create_app", "get_services", "record_exchange"]
