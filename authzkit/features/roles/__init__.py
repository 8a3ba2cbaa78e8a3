"""
Role registry feature module.
"""
