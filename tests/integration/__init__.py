"""
Integration Tests Module

Exercises RiftCommands and the command line entry point end to end.
"""
