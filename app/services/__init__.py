"""서비스 패키지 — 비즈니스 로직 계층.

Service package — Business logic layer.
Member and post services orchestrate validation, repositories and the
external collaborators (S3 uploader, weather API, token provider).
"""
