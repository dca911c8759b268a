"""Chart generation for markdown reports using matplotlib"""

import matplotlib

matplotlib.use("Agg")  # Use non-interactive backend
from pathlib import Path
from typing import Dict

import matplotlib.pyplot as plt
import numpy as np

from ..stress.models import Severity, StressTestOutput

SEVERITY_COLORS = {
    Severity.LOW: "#388e3c",  # Green
    Severity.MEDIUM: "#fbc02d",  # Yellow
    Severity.HIGH: "#f57c00",  # Orange
    Severity.CRITICAL: "#d32f2f",  # Red
}


class ChartGenerator:
    """Generates matplotlib charts for loan stress reports"""

    def __init__(self, output_dir: Path):
        """
        Initialize chart generator

        Args:
            output_dir: Directory to save chart images
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

        plt.style.use("seaborn-v0_8-darkgrid")

        self.fig_width = 10
        self.fig_height = 6
        self.dpi = 100

    def _save(self, fig, filename: str) -> Path:
        plt.tight_layout()

        output_path = self.output_dir / filename
        fig.savefig(output_path, dpi=self.dpi, bbox_inches="tight", facecolor="white")
        plt.close(fig)

        return output_path

    def generate_profit_impact_chart(
        self, output: StressTestOutput, filename: str = "profit_impact.png"
    ) -> Path:
        """
        Generate horizontal bar chart of profit change per scenario

        Args:
            output: Stress test output for one loan
            filename: Output filename

        Returns:
            Path to saved chart
        """
        fig, ax = plt.subplots(figsize=(self.fig_width, self.fig_height), dpi=self.dpi)

        names = [t.factor.name for t in output.stress_tests]
        profits = np.array([t.impact.on_profit for t in output.stress_tests])
        colors = [SEVERITY_COLORS[t.factor.severity] for t in output.stress_tests]

        positions = np.arange(len(names))
        bars = ax.barh(positions, profits, color=colors, alpha=0.8, edgecolor="black", linewidth=1)

        for bar, value in zip(bars, profits):
            ax.text(
                bar.get_width(),
                bar.get_y() + bar.get_height() / 2.0,
                f" {value:+,.0f}",
                ha="left" if value >= 0 else "right",
                va="center",
                fontsize=9,
                fontweight="bold",
            )

        ax.axvline(x=0, color="black", linewidth=1)
        ax.set_yticks(positions)
        ax.set_yticklabels(names)
        ax.invert_yaxis()
        ax.set_xlabel("Change in Profit", fontsize=12, fontweight="bold")
        ax.set_title(
            f"Profit Impact by Scenario (base profit {output.base_case.profit:,.0f})",
            fontsize=14,
            fontweight="bold",
            pad=20,
        )
        ax.grid(axis="x", alpha=0.3)

        return self._save(fig, filename)

    def generate_probability_shift_chart(
        self, output: StressTestOutput, filename: str = "probability_shift.png"
    ) -> Path:
        """
        Generate grouped bar chart of stressed default/repayment probabilities

        Args:
            output: Stress test output for one loan
            filename: Output filename

        Returns:
            Path to saved chart
        """
        fig, ax = plt.subplots(figsize=(self.fig_width, self.fig_height), dpi=self.dpi)

        base = output.base_case
        names = [t.factor.name for t in output.stress_tests]
        default_probs = np.array(
            [base.default_probability + t.impact.on_default for t in output.stress_tests]
        )
        repayment_probs = np.array(
            [base.repayment_probability + t.impact.on_repayment for t in output.stress_tests]
        )

        positions = np.arange(len(names))
        width = 0.4

        ax.bar(positions - width / 2, repayment_probs * 100, width, color="#1976d2", label="Repayment")
        ax.bar(positions + width / 2, default_probs * 100, width, color="#d32f2f", label="Default")

        ax.axhline(
            y=base.repayment_probability * 100,
            color="#1976d2",
            linestyle="--",
            alpha=0.7,
            label=f"Base Repayment ({base.repayment_probability:.0%})",
        )
        ax.axhline(
            y=base.default_probability * 100,
            color="#d32f2f",
            linestyle="--",
            alpha=0.7,
            label=f"Base Default ({base.default_probability:.0%})",
        )

        ax.set_xticks(positions)
        ax.set_xticklabels(names, rotation=30, ha="right", fontsize=9)
        ax.set_ylabel("Probability (%)", fontsize=12, fontweight="bold")
        ax.set_ylim(0, 100)
        ax.set_title("Stressed Probabilities", fontsize=14, fontweight="bold", pad=20)
        ax.grid(axis="y", alpha=0.3)
        ax.legend(loc="upper right", framealpha=0.9)

        return self._save(fig, filename)

    def generate_all_charts(self, output: StressTestOutput) -> Dict[str, Path]:
        """
        Generate all charts for a loan report

        Args:
            output: Stress test output for one loan

        Returns:
            Dictionary mapping chart names to their file paths
        """
        return {
            "profit_impact": self.generate_profit_impact_chart(output),
            "probability_shift": self.generate_probability_shift_chart(output),
        }
