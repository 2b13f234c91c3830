"""
Test suite for the Pocket Calculator

Contains:
- tests/unit/ : Unit tests for the engine modules, the session and the converters
"""
