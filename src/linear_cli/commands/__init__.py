"""One module per Linear resource; each exposes a typer sub-app and async handlers."""
