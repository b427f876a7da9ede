"""
Core domain models, error taxonomy and contracts.

This module contains the foundational building blocks that are independent
of external systems (venues, RPC nodes, wallets).
"""
