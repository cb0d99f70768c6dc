"""GitHub pull request webhook to Bamboo plan relay."""

__version__ = "0.1.0"
