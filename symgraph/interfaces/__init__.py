"""
Symbol graph - Interfaces Package
=================================

Contains all caller-facing interfaces (presentation layer).

Structure:
- api/: In-process API facade returning uniform ApiResponse envelopes
"""
