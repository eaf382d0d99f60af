"""
Warranty Ledger Test Suite
==========================

Test organization:
- tests/unit/               - Ledger host layer and auth (no external services)
- tests/services/warranty/  - Warranty service and HTTP routes on the mock ledger

Run tests:
    pytest                          # All tests
    pytest tests/unit               # Unit tests only
    pytest --cov=shared            # With coverage
"""
