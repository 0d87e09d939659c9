"""Realtime re-scoring — CRM change feed, in-process event bus, re-scoring subscriber."""
