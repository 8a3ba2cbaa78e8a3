"""
Route guard dependencies for host applications.
"""
