"""Server-rendered page blueprints."""
