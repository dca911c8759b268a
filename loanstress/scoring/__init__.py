"""Risk aggregation"""

from .aggregator import RiskAggregator, aggregate_risk, generate_summary

__all__ = ["RiskAggregator", "aggregate_risk", "generate_summary"]
