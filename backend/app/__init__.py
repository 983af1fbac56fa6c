"""Runner for the seller pipeline: settings, storage sinks and the CLI."""
