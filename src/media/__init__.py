"""Media helpers.

This package resolves media types and produces scaled renditions
for previews and screen-sized display.
"""
