from __future__ import annotations

import matplotlib.pyplot as plt
import matplotlib.ticker as mtick
import numpy as np
import pandas as pd

from artifact_forge import genshin_data

# Set plot size preemptively
plt.rcParams["figure.figsize"] = (12, 6)
plt.rcParams["figure.dpi"] = 125


def graph_substat_distribution(frame: pd.DataFrame, stat: str, title: str = None) -> plt.Axes:
    """Histogram of a substat's value over the sampled artifacts that carry it"""

    values = frame[stat][frame[stat] > 0]
    if stat not in genshin_data.flat_stats:
        values = 100 * values

    fig, ax1 = plt.subplots()
    if title is not None:
        ax1.set_title(title)
    ax2 = ax1.twinx()

    # Plot histogram
    plot_color = (179 / 255, 205 / 255, 227 / 255)
    nbins = max(1, min(50, values.nunique()))
    ax1.hist(values, bins=nbins, weights=np.full(len(values), 1 / max(1, len(frame))), color=plot_color)

    # Plot percentile line
    sorted_values = np.sort(values.to_numpy())
    ax2.plot(sorted_values, np.arange(1, len(sorted_values) + 1) / max(1, len(sorted_values)), color="k")

    # Set axes properties
    ax1.set_xlabel(genshin_data.stat2output_map.get(stat, stat))
    ax1.set_ylabel("Fraction of Artifacts")
    ax1.yaxis.set_major_formatter(mtick.PercentFormatter(1.0))
    ax2.set_ylabel("Cumulative Distribution Function")
    ax2.set_ylim(0, 1.02)
    ax2.yaxis.set_major_formatter(mtick.PercentFormatter(1.0))
    ax2.grid(axis="both")

    return ax1


def graph_main_stat_frequencies(observed: pd.Series, expected: pd.Series, title: str = None) -> plt.Axes:
    """Side by side bars of observed and expected main stat frequencies"""

    index = expected.index.union(observed.index, sort=False)
    observed = observed.reindex(index, fill_value=0.0)
    expected = expected.reindex(index, fill_value=0.0)
    locations = np.arange(len(index))
    width = 0.4

    fig, ax = plt.subplots()
    if title is not None:
        ax.set_title(title)
    ax.bar(locations - width / 2, observed.to_numpy(), width, label="Observed")
    ax.bar(locations + width / 2, expected.to_numpy(), width, label="Expected")

    # Set axes properties
    ax.set_xticks(locations)
    ax.set_xticklabels([genshin_data.stat2output_map.get(stat, stat) for stat in index], rotation=45, ha="right")
    ax.set_ylabel("Frequency")
    ax.yaxis.set_major_formatter(mtick.PercentFormatter(1.0))
    ax.legend()
    ax.grid(axis="y")

    return ax
