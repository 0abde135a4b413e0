"""Permission evaluation."""

from .evaluator import IPermissionEvaluator, PermissionEvaluator

__all__ = ["IPermissionEvaluator", "PermissionEvaluator"]
