"""
handlers/ - Presentation Layer
================================
FastAPI route handlers. Each handler receives the HTTP request,
delegates to the appropriate Service, and renders the response (HTML or JSON).
No business logic lives here.
"""
