"""Admin command line scripts."""
