"""API routers for the field-force reporting backend."""
