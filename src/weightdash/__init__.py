"""Weight-tracking analytics: statistics, trends and goal projections."""

__version__ = "0.1.0"
