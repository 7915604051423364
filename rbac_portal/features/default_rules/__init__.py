"""
Default role assignment by job title.
"""
