"""
Unit Tests Module

Covers the domain models, caches, metadata extraction, scanning, search,
the playback engine and service, presence and configuration.
"""
