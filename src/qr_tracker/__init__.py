"""QR Tracker: register objects, print their QR codes and record where they were scanned."""

__version__ = "1.0.0"
