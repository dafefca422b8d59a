"""Local services: git repository, config and history access."""
