"""
Test suite for LP Rebalancer

Contains:
- tests/unit/          : Unit tests for individual modules
"""
