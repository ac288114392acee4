"""Fedora workstation bootstrap (Python-first, idempotent).

Core design goals:
- Idempotent steps, safe to re-run after an interrupted run
- Best-effort: optional steps warn and continue
- One fatal precondition (the host must be Fedora)
- Declarative config and manifest files, never executed
- Centralized logging
"""

__all__ = []
