"""Merge-NMS kernel and its tensor front end."""
