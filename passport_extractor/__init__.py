"""Passport data extraction from photos and PDF files."""
