"""
Test Fixtures

Synthetic bank statements and movement builders shared by the unit and
integration tests. Nothing here contains real client data.
"""
