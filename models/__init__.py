"""
models/ - Domain Layer
======================
Plain dataclasses and enumerations shared by every other layer.
"""
