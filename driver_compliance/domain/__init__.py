"""Domain layer - core business objects and interfaces.

This layer contains:
- Domain entities
- Repository and adapter interfaces
- The error taxonomy
"""
