"""
Vidiary: local catalog of short video-diary clips.
"""
__version__ = "1.0.0"
