"""
Repository layer for data access.

Provides data access abstractions following the Repository pattern,
isolating the single-table key layout from callers.
"""
