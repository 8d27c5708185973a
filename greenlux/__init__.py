"""Greenhouse light monitoring: serial photodiode readings, Newton-Raphson lux estimation and MongoDB storage."""

__version__ = "0.1.0"