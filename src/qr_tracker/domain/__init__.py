"""Domain layer for QR Tracker.

Contains the object/location data model, identity token derivation and
location sample construction. No dependencies on the HTTP layer.
"""
