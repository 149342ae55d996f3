"""
Entry point for ``python -m salonbooking``.
"""

from .cli.app import app

if __name__ == "__main__":
    app()
