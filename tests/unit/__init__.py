"""Unit tests for floe-faker.

These tests need no external services; rows are stored in InMemoryStore.
"""
