"""HTTP API package."""

from hawkward.api.app import create_app, register_error_handlers

__all__ = ["create_app", "register_error_handlers"]
