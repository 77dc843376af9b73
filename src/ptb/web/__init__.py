"""Flask web application, auth gate and template helpers."""
