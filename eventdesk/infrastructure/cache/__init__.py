"""
Tag-aware cache backends.
"""
