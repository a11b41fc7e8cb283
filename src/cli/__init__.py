"""Command line interface for cluster-drill."""
