def main() -> None:
    """Entry point for the application: serve the REST API."""
    from resume_builder.api.main import main as api_main

    api_main()
