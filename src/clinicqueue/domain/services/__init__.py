"""
Domain services: pure functions over domain entities.
"""
