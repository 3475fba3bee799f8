"""
Web interface for the deal audit engine.
"""
