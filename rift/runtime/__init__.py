"""
Runtime Module

Resolves per-user directories and bootstraps logging before the
application services start.
"""
