"""Convert a camera RAW capture into a linear, scene-referred OpenEXR image."""

__version__ = "0.1.0"
