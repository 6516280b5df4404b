"""Static blog generator: Markdown posts in, HTML pages and a sitemap out."""

__version__ = "0.1.0"
