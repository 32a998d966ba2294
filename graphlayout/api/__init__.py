"""
HTTP surface of the layout engine.
"""
