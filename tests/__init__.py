"""
Test suite for MediBook.

Contains unit and integration tests for the application's functionality.
"""
