"""
REST API for historical egg prices.

Serves the price CSV from memory via HTTP endpoints for
dashboards, notebooks and other clients.
"""

__version__ = "1.0.0"
