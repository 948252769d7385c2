"""CLI command modules; each exposes register_commands(cli)."""
