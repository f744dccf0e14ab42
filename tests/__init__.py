"""
Test suite for the unit sheet engine.

Run all tests: pytest
Run with coverage: pytest --cov=. --cov-report=html
Run unit tests only: pytest tests/unit/
Run specific file: pytest tests/unit/test_grouping_engine.py -v
"""
