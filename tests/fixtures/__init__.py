"""Canned F5OS responses shared by the test suite."""
