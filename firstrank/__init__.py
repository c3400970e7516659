"""
!first Leaderboard - Core Package

This package contains the core modules for:
- Opening-time reconstruction and ranking (firstrank.ranking)
- The flat-file record store (firstrank.storage)
- Shared configuration and utilities
"""

__version__ = "1.0.0"
