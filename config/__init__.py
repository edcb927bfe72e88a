"""Top-level package for Django configuration.

This package holds the settings modules for different environments, the
URL routing and the entry points for WSGI and ASGI servers.
"""
