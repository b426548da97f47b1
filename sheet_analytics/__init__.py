"""Spreadsheet analytics service."""
