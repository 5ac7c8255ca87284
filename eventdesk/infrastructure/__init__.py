"""
Infrastructure layer package.

Contains concrete implementations (adapters) of the ports
defined in the domain layer. This is where the SQL storage,
the tag-aware cache and other external integrations live.
"""
