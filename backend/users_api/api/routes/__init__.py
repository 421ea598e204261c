"""Route Modules — one file per resource/concern.

Invariants:
    - Each module defines its own APIRouter with prefix and tags
    - Routes orchestrate core validation/policy and the repository; no SQL here

Design Decisions:
    - Explicit registration in main.py over auto-discovery
"""
