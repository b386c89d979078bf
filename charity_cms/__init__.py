"""Charity CMS backend package."""
