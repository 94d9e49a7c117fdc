"""Десктопный дашборд обогащения Instagram-профилей"""

__version__ = "0.1.0"
