"""Driver adapters.

Each adapter package imports its driver at module import time, so import
the adapter you need directly, or go through :func:`sqlraw.config.config_from_url`.
"""
