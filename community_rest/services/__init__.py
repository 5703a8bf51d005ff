"""Services Layer — resource controllers orchestrating stores, gates and projection.

Invariants:
    - One controller class per resource family on top of ResourceController
    - Controllers hold no state between requests
"""
