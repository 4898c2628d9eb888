"""
Test suite for the region historian.

Run: python -m pytest region_historian/tests -v
"""
