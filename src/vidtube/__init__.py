"""VidTube - backend for a video-sharing platform.

Provides user registration, cookie-based JWT authentication with refresh
token rotation, profile management, channel profiles and watch history.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
