"""
Integration tests: the FastAPI app end to end, and the Redis store against a
live server (skipped when Redis is not reachable).
"""
