"""
数据库模块
"""

from .init_db import get_engine, create_tables, init_db

__all__ = ["get_engine", "create_tables", "init_db"]
