"""
Test Suite for Cash Map

Test Structure:
- fixtures/: Synthetic bank statements and movement builders
- unit/: Unit tests mirroring src/ package structure
- integration/: Store, configuration and CLI workflow tests

Test Categories:
- Core utilities (currency, dates, models, config)
- Statement parsing and classification
- Cash-flow aggregation, debts and projection
- Client lifecycle

Test Data:
All statements and clients are synthetic. Real client data is never
included in tests.
"""
