"""Application layer: translation policy, boundary mechanics, and ports."""
