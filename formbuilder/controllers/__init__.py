"""
API controllers for forms and responses.
"""
