"""
skillsync test suite.

Tests build real skill trees under pytest's tmp_path; helpers.py holds the
shared builders and a Reporter that captures plain-text output.
"""
