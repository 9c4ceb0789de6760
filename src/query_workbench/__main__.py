"""Entry point for running query_workbench as a module."""

from query_workbench.server import cli_entry

if __name__ == "__main__":
    cli_entry()
