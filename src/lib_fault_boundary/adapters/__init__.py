"""Adapters: concrete collaborators and the boundaries that wrap them."""
