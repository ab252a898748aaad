"""Core utilities shared across treepack modules."""
