"""Controlled vocabularies for proposal categories and review statuses."""
