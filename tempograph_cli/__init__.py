"""tempograph command line interface."""
from tempograph import __version__

__all__ = ["__version__"]
