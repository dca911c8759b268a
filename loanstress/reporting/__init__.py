"""Report generation modules"""

from .charts import ChartGenerator
from .markdown_report import MarkdownReportGenerator

__all__ = ["MarkdownReportGenerator", "ChartGenerator"]
