"""
Flowsheet Compounds Test Suite

Test modules:
- test_catalog.py: Compound catalog and file loading tests
- test_filtering.py: Catalog search and view building tests
- test_synchronizer.py: Selection propagation tests
- test_editor.py: Compounds editor controller tests
- test_api.py: HTTP API endpoint tests

Run all tests:
    pytest tests/ -v

Run specific test file:
    pytest tests/test_synchronizer.py -v
"""
