"""
Core module - configuration, logging and the exception hierarchy.
"""
