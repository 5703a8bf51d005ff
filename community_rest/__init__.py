"""Community REST Package — member and notification endpoints over a resource controller.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
