"""
wasgeit: concert listings from venue program pages

This package provides:
- A registry of supported venues
- One adapter per venue describing where events sit in its program page
- A crawl engine turning a parsed page into normalized events
- Date-time normalization for incomplete and locale-specific date text

Target: Bern-area live music venues
"""

__version__ = "1.0.0"
