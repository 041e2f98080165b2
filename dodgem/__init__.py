"""Dodgem - keep your Rocket League Garage trades at the top of the listing."""

__app_name__ = "dodgem"
__version__ = "1.0.0"

__all__ = ["__app_name__", "__version__"]
