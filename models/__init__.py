"""
models/ - Domain Layer
======================
Plain dataclasses describing registry records, plus the field catalogue
shared by validation, persistence and rendering.
"""
