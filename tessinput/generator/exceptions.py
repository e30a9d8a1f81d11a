class FontNotFound(Exception):
    """Raised when a font reference cannot be resolved to a loadable font.

    This covers font files that do not exist or cannot be parsed, and
    family/style combinations that are not installed in any of the scanned
    font directories. It is raised while the configuration is being resolved,
    before any rendering starts.
    """
    pass
