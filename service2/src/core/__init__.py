"""Core request chaining, downstream HTTP client and tracing setup."""
