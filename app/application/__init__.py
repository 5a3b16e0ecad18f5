"""Application layer: DTOs, interfaces, and pure audit services.

Depends only on domain and protocol definitions (DIP).
Infrastructure implements the interfaces (repos, stores, lookups).
"""
