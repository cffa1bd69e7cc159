"""
BlogContent: single-table data access for a blog API.

Users, blogs and comments live in one key-value table and are reached
through key lookups and index queries only.
"""

__version__ = "0.1.0"
