"""
Carve food analysis backend.

Structure:
- domain/: Models, ports, errors, prompt and response parsing
- infrastructure/: Completion client, image optimization, connectivity, storage
- application/: Use cases (log food entry, daily summary)
"""

__version__ = "1.0.0"
