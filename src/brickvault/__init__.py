"""brickvault - track a LEGO collection and build a customizable home view."""

__version__ = "0.1.0"
