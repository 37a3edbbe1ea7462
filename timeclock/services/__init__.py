"""서비스 패키지 — 비즈니스 로직 계층.

Service package — Business logic layer.
The pairing engine and status resolver are pure functions over loaded
records; the remaining services orchestrate repositories inside the
caller's transaction and leave committing to the routers.
"""
