"""Top-level package for Django configuration.

Contains settings modules for different environments, the root URL
configuration and entry points for WSGI and ASGI.
"""
