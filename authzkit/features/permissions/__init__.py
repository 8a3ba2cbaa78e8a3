"""
Permission registry feature module.
"""
