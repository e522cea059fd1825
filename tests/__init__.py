"""Tests for floe-faker."""
