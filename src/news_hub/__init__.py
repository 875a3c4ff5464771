"""News hub: multi-provider news aggregation and reading tracker."""

__version__ = "0.3.0"
