"""Credit-metrics analysis module."""

from .parameters import normalize_parameters, normalize_projection
from .pipeline import analyze_credit, analysis_to_dict

__all__ = ["analyze_credit", "analysis_to_dict", "normalize_parameters", "normalize_projection"]
