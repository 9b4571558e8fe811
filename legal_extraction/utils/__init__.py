"""
Shared patterns and text helpers.
"""
