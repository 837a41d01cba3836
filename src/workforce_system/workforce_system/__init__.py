"""Workforce System package.

This package is organized by feature modules (employees, shifts, checkins,
reports, ...) with a thin Flask controller layer and service/repository layers
persisted as JSON collections in a key-value store.
"""
