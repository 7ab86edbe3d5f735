"""Selfiegram command line tools."""
