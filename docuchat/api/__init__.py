"""HTTP boundary: FastAPI app, routers and dependencies."""
