"""
Error mapping package.

Translates events domain errors into JSON HTTP responses in one place.
"""
