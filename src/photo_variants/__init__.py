"""Photo variants: derive resized WebP variants and a BlurHash placeholder for uploaded photos."""

__version__ = "0.1.0"
