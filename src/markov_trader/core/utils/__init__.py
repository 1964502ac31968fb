"""
Shared utilities: validation helpers and logging decorators.
"""
