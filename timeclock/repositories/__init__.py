"""레포지토리 패키지 — 데이터베이스 쿼리 계층.

Repository package — Database query layer.
Punch and justification stores plus the read-side directories. Each
repository extends BaseRepository and only flushes; routers commit.
"""
