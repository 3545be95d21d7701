"""Command line interface for crewrota."""
