"""Version of the vista-versioning package itself.

This is the tool's own release version, read by pyproject.toml at build time.
It is unrelated to the version.properties files the tool manages.
"""

__version__ = "1.0.0"
