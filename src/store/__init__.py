"""Storage backends.

This package implements the blob content store and the single root
register that the catalog uses as its only mutable pointer.
"""
