"""Application code for service2: API, routes, middleware and core logic."""
