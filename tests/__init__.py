"""
Tests Module

Contains test suites for Rift:
- unit: Tests for individual components against fakes and generated files
- integration: Command layer and CLI tests over a real library folder
- conftest/fakes: Shared fixtures, WAV generation and the fake audio output
"""
