"""CLI command modules; importing a module registers its commands on the app."""
