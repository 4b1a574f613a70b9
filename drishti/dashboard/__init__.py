"""Dashboard shell: state ownership and the application entry point."""
