"""Album catalog layer.

This package keeps a sorted two-level catalog (albums of files) on an
immutable blob store, propagating every change bottom-up into a new
catalog blob whose token is written to the root register.
"""
