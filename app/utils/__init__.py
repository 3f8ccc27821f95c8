"""
UTILITIES PACKAGE
=================

Helpers used by the services (no HTTP, no business logic):

  sanitize - sanitize_input(raw): trims user text, strips < > " ' ` and caps its length.
"""
