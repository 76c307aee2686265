"""Route Modules — one file per resource/concern.

Invariants:
    - Each module defines its own APIRouter without a prefix
    - Prefixes are fixed at mount time in main.create_app
"""
