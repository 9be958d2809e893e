"""Result shaping for JSON and API output."""

from .result_builder import aggregation_to_dict, prepare_results

__all__ = ["prepare_results", "aggregation_to_dict"]
