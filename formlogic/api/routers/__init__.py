"""API 라우터"""

from . import logic, rulesets

__all__ = ['logic', 'rulesets']
