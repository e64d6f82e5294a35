"""Market quotes from several data sources, with watchlist and summary text rendering."""

__version__ = "4.0.0"