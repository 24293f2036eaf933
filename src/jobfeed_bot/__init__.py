"""jobfeed-bot — poll job feeds, score postings, notify subscribers once."""

__version__ = "1.0.0"
