"""Clerk user synchronization library."""
