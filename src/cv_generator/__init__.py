"""CV generator PII file service."""

__version__ = "0.1.0"


def main() -> None:
    """Entry point for the development API server."""
    from cv_generator.api.main import main as api_main

    api_main()
