"""Core: settings, exception handlers, rate limiter, lifespan."""
