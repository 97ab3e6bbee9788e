"""Find rejected media assets, report reclaimable space, and delete them."""

__version__ = "0.1.0"
