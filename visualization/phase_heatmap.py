# phase_heatmap.py - Year Heatmap of Phase Probabilities
# ======================================================

"""
Year-at-a-glance heatmap for one phase.

Features:
- 12 rows (months) x 31 columns (days)
- Cell colour = share of tracks in the phase on that day
- Best day of each month outlined
- Days that do not exist in a month are greyed out
- Dark/Light theme support
"""

import matplotlib
import matplotlib.pyplot as plt
import matplotlib.patches as mpatches
from calendar import month_abbr, monthrange
from typing import Optional
import numpy as np

from core.phase_calendar import PhaseCalendar


class PhaseHeatmap:
    """
    Month x day probability grid for a single phase
    """

    def __init__(self, theme='light'):
        self.theme = theme

        if theme == 'dark':
            self.bg_color = '#1e1e1e'
            self.text_color = '#ffffff'
            self.grid_color = '#444444'
            self.missing_color = '#2d2d2d'
            self.best_color = '#F0E442'
        else:
            self.bg_color = '#ffffff'
            self.text_color = '#000000'
            self.grid_color = '#cccccc'
            self.missing_color = '#e0e0e0'
            self.best_color = '#D55E00'

        # Sequential, colorblind-friendly
        self.cmap = matplotlib.colormaps["viridis"].copy()
        self.cmap.set_bad(self.missing_color)

    def build_grid(self, calendar: PhaseCalendar, year: int, phase: str) -> np.ndarray:
        """
        12 x 31 array of percentages; NaN where the day does not exist,
        0 where the phase never covers the day.
        """
        grid = np.full((12, 31), np.nan)
        for month in range(1, 13):
            days_in_month = monthrange(year, month)[1]
            grid[month - 1, :days_in_month] = 0.0
            for entry in calendar.month_days(month, year, phase):
                grid[month - 1, entry.day.day - 1] = entry.probability
        return grid

    def plot_year(
        self,
        calendar: PhaseCalendar,
        year: int,
        phase: str,
        save_path: Optional[str] = None
    ) -> np.ndarray:
        """
        Plot the heatmap; saves to ``save_path`` or shows it.

        Returns the plotted grid.
        """
        grid = self.build_grid(calendar, year, phase)
        best_days = calendar.best_days(year, phase)

        fig, ax = plt.subplots(figsize=(16, 6))
        fig.patch.set_facecolor(self.bg_color)
        ax.set_facecolor(self.bg_color)

        image = ax.imshow(
            np.ma.masked_invalid(grid),
            cmap=self.cmap,
            vmin=0,
            vmax=100,
            aspect='auto'
        )

        for month, day in best_days.items():
            ax.add_patch(mpatches.Rectangle(
                (day.day - 1.5, month - 1.5), 1, 1,
                fill=False, edgecolor=self.best_color, linewidth=2
            ))

        ax.set_xticks(range(31))
        ax.set_xticklabels([str(d) for d in range(1, 32)], color=self.text_color, fontsize=8)
        ax.set_yticks(range(12))
        ax.set_yticklabels([month_abbr[m] for m in range(1, 13)], color=self.text_color)
        ax.set_xticks(np.arange(-0.5, 31, 1), minor=True)
        ax.set_yticks(np.arange(-0.5, 12, 1), minor=True)
        ax.grid(which='minor', color=self.grid_color, linewidth=0.5)
        ax.tick_params(which='minor', length=0)

        ax.set_title(
            f"{phase} - {year} (anchor {calendar.anchor_date.strftime('%d %m %Y')}, "
            f"{len(calendar.cycle_set)} tracks)",
            color=self.text_color,
            fontsize=14,
            fontweight='bold'
        )

        colorbar = fig.colorbar(image, ax=ax)
        colorbar.set_label('% of tracks', color=self.text_color)
        colorbar.ax.yaxis.set_tick_params(color=self.text_color)
        plt.setp(colorbar.ax.get_yticklabels(), color=self.text_color)

        legend_elements = [
            mpatches.Patch(facecolor='none', edgecolor=self.best_color, label='Best day of month'),
            mpatches.Patch(color=self.missing_color, label='No such day'),
        ]
        ax.legend(
            handles=legend_elements,
            loc='upper center',
            bbox_to_anchor=(0.5, -0.08),
            ncol=2,
            frameon=True,
            facecolor=self.bg_color,
            edgecolor=self.grid_color,
            labelcolor=self.text_color
        )

        if save_path:
            plt.savefig(save_path, dpi=150, bbox_inches='tight', facecolor=self.bg_color)
            print(f"✓ Heatmap saved: {save_path}")
        else:
            plt.show()

        plt.close(fig)
        return grid
