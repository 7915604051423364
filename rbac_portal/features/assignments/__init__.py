"""
Role assignment lifecycle and audit trail.
"""
