"""Core infrastructure: paths, configuration, errors and theming."""
