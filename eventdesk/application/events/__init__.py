"""
Application layer for the events bounded context.

Use cases coordinate domain entities and ports to fulfill
listing, search and affiliate operations.
"""
