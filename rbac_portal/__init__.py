"""
RBAC portal core.

Permission-scope resolution and role-assignment lifecycle engine for the
role administration portal.
"""
