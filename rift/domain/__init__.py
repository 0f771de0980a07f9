"""
Domain Layer - Core Business Entities

This layer defines the entities shared by every other layer and holds no
infrastructure code.

Modules:
- models: Track and PlaybackState
- exceptions: Typed failures raised by the library and playback services
"""
