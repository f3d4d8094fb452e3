"""Integrations with backing services."""

from .userstore import UserStore, init_app, current_store
