"""
Pipe Catalog - search over a pipe, tobacco and accessory collection.
"""
__version__ = "1.0.0"
