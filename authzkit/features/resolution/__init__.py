"""
Read-only resolution of role and permission checks.
"""
