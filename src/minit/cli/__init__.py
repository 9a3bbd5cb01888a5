"""The minit command-line interface."""

from ._app import create_app, main

__all__ = ["create_app", "main"]
