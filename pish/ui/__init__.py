from .manager import UIManager

__all__ = ["UIManager"]
