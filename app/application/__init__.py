"""Application layer: interfaces, DTOs and services.

Depends only on domain and protocol definitions (DIP).
The relational store adapters implement the repository interfaces.
"""
