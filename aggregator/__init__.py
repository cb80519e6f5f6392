"""Multi-venue swap aggregator."""

from aggregator.aggregator import Aggregator, get_default_aggregator

__version__ = "0.1.0"
__all__ = ["Aggregator", "get_default_aggregator", "__version__"]
