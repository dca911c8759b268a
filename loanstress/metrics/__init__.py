"""Portfolio metrics"""

from .portfolio import PortfolioStressAnalyzer

__all__ = ["PortfolioStressAnalyzer"]
