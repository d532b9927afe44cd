"""HTTP layer - FastAPI application, routers and dependency wiring."""
