"""
Tests package for Quotum Admin

Core tests need no display; widget tests run on Qt's offscreen platform.
"""
