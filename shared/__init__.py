"""
Shared utilities for the Azure AD token verifier.

This package aggregates common building blocks consumed by the service:

- config: Verifier settings via pydantic-settings
- logging: Structured logging with request/tenant correlation
- errors: Canonical error types and responses
- base_service: FastAPI application scaffolding
- test_helpers: Key, certificate and token factories for tests

Do not import from azure_auth into shared/.
"""
