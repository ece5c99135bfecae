"""
Services module for business logic separation.

This module contains the link lifecycle and click-accounting components,
keeping them separate from API endpoints and storage backends.
"""
