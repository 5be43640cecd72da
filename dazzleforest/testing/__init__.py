"""Testing utilities for DazzleForest consumers."""

from .fixtures import ForestTestHelper

__all__ = ['ForestTestHelper']
