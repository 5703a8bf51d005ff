"""Route Modules — one file per resource/concern.

Invariants:
    - Each module defines its own APIRouter with tags; the namespace prefix
      is applied in main.py
    - Routes never contain business logic (delegate to controllers)
"""
