"""
Cross-cutting concerns shared by the events and admin interfaces.

- Logging configuration
- Domain error to HTTP mapping
- Security headers and rate limiting
"""
