"""
Per-principal role and permission grants.
"""
