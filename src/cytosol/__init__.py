"""Parser for the Cytosol rule/reaction language."""

__version__ = "0.1.0"
