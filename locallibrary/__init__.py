"""Local Library - Core Application Package

This package contains the catalog application modules including:
- Web application and routes (api.py)
- Command line interface (main.py)
- Entity models (author.py, book.py, genre.py, bookinstance.py)
- Document store layer (database.py)
- Form validation and sanitization (validators.py)
- Request controllers (controllers/)
"""

__version__ = "1.0.0"
