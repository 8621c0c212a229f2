"""Structured document collaborator and its section store boundary."""

from .boundary import STORE_FAILURES, FileSectionStore

__all__ = ["FileSectionStore", "STORE_FAILURES"]
