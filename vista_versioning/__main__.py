"""
Entry point for python -m vista_versioning

Allows running the package as a module:
    python -m vista_versioning bump-build
"""

from .cli import main

if __name__ == '__main__':
    main()
