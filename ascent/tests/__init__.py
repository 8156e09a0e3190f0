"""
Tests for the Ascent engine.
"""
