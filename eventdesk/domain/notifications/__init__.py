"""
Notifications bounded context — domain layer.

Push payload parsing and notification click routing.
"""
