"""
Visualization utilities.

Responsibility: plots only. No logic, no computation.
"""

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
from pathlib import Path
from typing import Optional


def plot_record_lengths(df: pd.DataFrame, output_path: Optional[Path] = None) -> plt.Figure:
    """
    Plot description length of each record against the value that set it.

    Parameters
    ----------
    df : pd.DataFrame
        DataFrame from records_to_frame with columns n, length,
        num_factors, num_distinct.
    output_path : Path, optional
        If provided, save figure to this path.

    Returns
    -------
    matplotlib.Figure
    """
    fig, axes = plt.subplots(1, 2, figsize=(14, 5))

    ax = axes[0]
    ax.step(df['n'], df['length'], where='post', marker='o')
    # symlog keeps a record at n=0 (scan started at 0) on the axis
    ax.set_xscale('symlog', linthresh=1)
    ax.set_xlabel('n (record holder)')
    ax.set_ylabel('Description length (characters)')
    ax.set_title('Longest description so far')
    ax.grid(True, alpha=0.3)

    ax = axes[1]
    x = np.arange(len(df))
    width = 0.35
    ax.bar(x - width/2, df['num_factors'], width, label='Omega (with multiplicity)', alpha=0.8)
    ax.bar(x + width/2, df['num_distinct'], width, label='omega (distinct)', alpha=0.8)
    ax.set_xticks(x)
    ax.set_xticklabels(df['n'], rotation=90)
    ax.set_xlabel('Record holder')
    ax.set_ylabel('Prime factors')
    ax.set_title('Factor counts per record')
    ax.legend()
    ax.grid(True, alpha=0.3, axis='y')

    plt.tight_layout()

    if output_path:
        fig.savefig(output_path, dpi=150, bbox_inches='tight')

    return fig
