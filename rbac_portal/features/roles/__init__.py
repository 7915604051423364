"""
Role definitions and attribute-scoped access decisions.
"""
