"""
Infrastructure layer package.

This package contains modules for interacting with the outside world:
- Form storage backends
- Delivery sinks (files, streams)
- Logging configuration
- Path utilities
"""
