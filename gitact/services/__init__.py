"""Repository action services: git, history, pull requests, execution."""
