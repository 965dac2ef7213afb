"""
services/ - Business Logic Layer
================================
Validation policy and the create/update/delete workflow.
Services call repositories and return result objects; they never render HTTP.
"""
