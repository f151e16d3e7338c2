"""Scanning, persistence and display services for git-grove."""
