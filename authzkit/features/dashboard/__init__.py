"""
Admin dashboard API protected by HTTP Basic auth.
"""
