"""Product progress map: weighted progress model and tree layout engine."""

__version__ = "1.0.0"
