"""Entry point for ``python -m krfiles``; same error boundary as the script."""

from krfiles.cli.app import cli

if __name__ == "__main__":
    cli()
