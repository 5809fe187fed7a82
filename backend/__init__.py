"""Application entry point: app factory, settings and auth."""
