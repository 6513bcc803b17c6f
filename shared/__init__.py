"""
Shared utilities for the Books Service.

This package aggregates common building blocks consumed by services:

- config: Service configuration via pydantic-settings
- logging: Structured logging with trace correlation
- metrics: Prometheus metrics helpers
- errors: Canonical error types and responses
- base_service: FastAPI application scaffold with health and metrics

Do not import from service_* packages into shared/.
"""
