"""
Domain layer for the form builder: forms and the responses collected for them.
"""
