"""Proposal Box: AI-moderated suggestion box backend."""
