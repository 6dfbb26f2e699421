"""Cost Insights - natural-language AWS cost comparison engine"""

__version__ = "0.1.0"
