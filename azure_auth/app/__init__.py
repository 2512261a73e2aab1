"""
Azure AD token verification.

Verifies bearer tokens against the signing certificates a tenant publishes
through its OpenID configuration, caching both lookups in process.
"""
