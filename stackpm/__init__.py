"""stackpm - Haskell Stack 包管理后端"""

__version__ = "0.1.0"
