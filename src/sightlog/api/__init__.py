"""Web interface: FastAPI routes, middleware and Jinja2 templates."""
