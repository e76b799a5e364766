"""
services/ - Business Logic Layer
================================
Validation and the staff flows. Services talk to repositories and return
results the presentation layer can show as they are.
"""
