"""git-req: check out merge/pull request branches by request ID."""

__version__ = "2.5.0"
