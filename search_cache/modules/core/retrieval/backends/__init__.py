"""
Search Backends - 유사도 검색 백엔드 구현체

- InMemorySearchBackend: numpy 코사인 유사도 기반 로컬 백엔드
"""

from .memory_backend import InMemorySearchBackend

__all__ = ["InMemorySearchBackend"]
