"""
Tests for code outside the Django apps.

App-specific tests stay in their app directories (e.g. contact/tests.py).
"""
