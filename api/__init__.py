"""HTTP API: routes, dependencies and wire schemas."""
