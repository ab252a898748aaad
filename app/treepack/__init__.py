"""treepack - select directory trees into archive namespaces."""

__version__ = "0.1.0"
