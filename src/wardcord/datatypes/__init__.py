"""Identifiers, domain records, results and exceptions shared across Wardcord."""
