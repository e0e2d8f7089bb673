"""Rental back office package.

Organized by feature modules (pages, invoices, incidents, ...) on top of a
small cache/api core, with a thin Flask controller layer in front.
"""
