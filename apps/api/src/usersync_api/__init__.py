"""Clerk user sync API service."""
