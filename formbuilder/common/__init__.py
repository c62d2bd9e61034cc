"""
Common utilities and shared functionality for the form builder backend.
"""
