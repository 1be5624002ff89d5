"""REST API for the countertop configurator."""

from encimeras.web.app import app, create_app

__all__ = ["app", "create_app"]
