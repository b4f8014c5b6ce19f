"""Website performance audit: PageSpeed Insights + AI suggestions."""
__version__ = "1.0.0"
