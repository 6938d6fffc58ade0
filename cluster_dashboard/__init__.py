"""Cluster health dashboard service."""
