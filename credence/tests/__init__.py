"""
Test suite for the Credence engine.
"""
