"""
Application layer package.

Contains use cases that orchestrate domain logic.
Use cases receive DTOs, call domain services via ports,
and return result DTOs. No framework imports allowed.
"""
