"""Image transform adapter for the Media Optimizer."""

from .adapter import PillowTransformer, Transformer, TransformResult, fit_size, resolve_format

__all__ = ['PillowTransformer', 'Transformer', 'TransformResult', 'fit_size', 'resolve_format']
