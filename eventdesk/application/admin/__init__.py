"""
Application layer for admin actions.

Every action checks the admin privilege, performs its mutation,
then invalidates the cache tags it touched.
"""
