"""
sample_sections.py — Synthetic SEO dashboard sections.

Builds the four dashboard panels used by the CLI demo from a seeded
synthetic dataset:

    ranking_trend     — average keyword position, 12 months
    organic_traffic   — monthly organic sessions vs prior year
    keyword_buckets   — ranked keywords by position bucket
    top_keywords      — table of best-ranked keywords

Each panel is a matplotlib Figure wrapped in a Section, carrying a "LIVE"
badge that is hidden during export. Figures are created without pyplot
so they stay alive on the surface until export.
"""

import logging
from typing import Any

import numpy as np
import pandas as pd
from matplotlib.figure import Figure
from matplotlib.text import Text
from matplotlib.ticker import FuncFormatter

from report_compositor.surface import Section, Surface

logger = logging.getLogger(__name__)

SECTION_IDS = ("ranking_trend", "organic_traffic", "keyword_buckets", "top_keywords")

_BUCKETS = ("Top 3", "4-10", "11-20", "21-50", "51-100")
_SEED_TERMS = (
    "sourdough bread", "bakery near me", "custom birthday cakes", "gluten free bakery",
    "croissants delivery", "wedding cake prices", "artisan bread", "vegan cupcakes",
    "cake shop", "fresh pastries", "bread subscription", "cookie boxes",
)


def _mpl_hex(h: str) -> str:
    """Return hex with # for matplotlib."""
    return f"#{h.lstrip('#')}"


def generate_dataset(months: int = 12, seed: int = 42) -> dict[str, pd.DataFrame]:
    """Generate monthly ranking/traffic history and a keyword snapshot.

    Args:
        months: Months of history ending with the current month.
        seed: Seed for the NumPy generator.

    Returns:
        Dict with 'monthly' (period, avg_position, sessions, sessions_prior_year)
        and 'keywords' (keyword, position, volume, change) frames.
    """
    rng = np.random.default_rng(seed)
    periods = pd.period_range(end=pd.Timestamp.today(), periods=months, freq="M")

    trend = np.linspace(28, 14, months) + rng.normal(0, 1.2, months)
    sessions = np.linspace(4200, 7800, months) * (1 + rng.normal(0, 0.05, months))
    prior = sessions * rng.uniform(0.7, 0.9, months)

    monthly = pd.DataFrame({
        "period": periods.strftime("%b %y"),
        "avg_position": trend.round(1),
        "sessions": sessions.round(0).astype(int),
        "sessions_prior_year": prior.round(0).astype(int),
    })

    keywords = pd.DataFrame({
        "keyword": list(_SEED_TERMS),
        "position": rng.integers(1, 60, len(_SEED_TERMS)),
        "volume": rng.integers(90, 9900, len(_SEED_TERMS)),
        "change": rng.integers(-6, 9, len(_SEED_TERMS)),
    }).sort_values("position", ignore_index=True)

    logger.debug("Generated %d months and %d keywords", len(monthly), len(keywords))
    return {"monthly": monthly, "keywords": keywords}


def _styled_axes(fig: Figure):
    ax = fig.subplots()
    fig.patch.set_facecolor("white")
    ax.set_facecolor("white")
    ax.spines[["top", "right"]].set_visible(False)
    return ax


def _title(ax, text: str, brand: dict[str, Any]) -> None:
    ax.set_title(text, fontsize=10, color=_mpl_hex(brand["primary"]),
                 fontweight="bold", pad=8)


def live_badge(fig: Figure, brand: dict[str, Any]) -> Text:
    """Add the on-screen "LIVE" badge to the top-right corner of `fig`.

    The badge is dashboard chrome and is hidden while the figure is captured.
    """
    return fig.text(
        0.99, 0.98, "LIVE", ha="right", va="top", fontsize=7, fontweight="bold",
        color="white",
        bbox={"boxstyle": "round,pad=0.3", "facecolor": _mpl_hex(brand["accent"]),
              "edgecolor": "none"},
    )


def ranking_trend_figure(monthly: pd.DataFrame, brand: dict[str, Any]) -> Figure:
    """Line chart: average ranking position (lower is better)."""
    fig = Figure(figsize=(8, 3.2))
    ax = _styled_axes(fig)
    x = range(len(monthly))

    ax.fill_between(x, monthly["avg_position"], monthly["avg_position"].max() + 2,
                    alpha=0.12, color=_mpl_hex(brand["accent"]))
    ax.plot(x, monthly["avg_position"], color=_mpl_hex(brand["primary"]),
            linewidth=2, marker="o", markersize=4)
    ax.invert_yaxis()
    ax.set_xticks(list(x))
    ax.set_xticklabels(monthly["period"], rotation=45, ha="right", fontsize=7.5)
    ax.set_ylabel("Avg. position", fontsize=8)
    ax.grid(axis="y", linestyle="--", alpha=0.4)
    _title(ax, "Average Keyword Position", brand)
    fig.tight_layout()
    return fig


def organic_traffic_figure(monthly: pd.DataFrame, brand: dict[str, Any]) -> Figure:
    """Grouped bars: organic sessions vs prior year."""
    fig = Figure(figsize=(8, 3.5))
    ax = _styled_axes(fig)
    x = np.arange(len(monthly))
    width = 0.38

    ax.bar(x - width / 2, monthly["sessions"], width, label="This year",
           color=_mpl_hex(brand["primary"]), alpha=0.9, zorder=3)
    ax.bar(x + width / 2, monthly["sessions_prior_year"], width, label="Prior year",
           color=_mpl_hex(brand["accent"]), alpha=0.5, zorder=3)
    ax.set_xticks(x)
    ax.set_xticklabels(monthly["period"], rotation=45, ha="right", fontsize=7.5)
    ax.yaxis.set_major_formatter(FuncFormatter(lambda v, _: f"{v / 1000:.0f}k"))
    ax.legend(fontsize=8, loc="upper left", framealpha=0.5)
    ax.grid(axis="y", linestyle="--", alpha=0.4, zorder=0)
    _title(ax, "Organic Sessions vs Prior Year", brand)
    fig.tight_layout()
    return fig


def keyword_buckets_figure(keywords: pd.DataFrame, brand: dict[str, Any]) -> Figure:
    """Horizontal bars: ranked keywords per position bucket."""
    bins = [0, 3, 10, 20, 50, 100]
    counts = (
        pd.cut(keywords["position"], bins=bins, labels=_BUCKETS)
        .value_counts()
        .reindex(list(_BUCKETS), fill_value=0)
    )

    fig = Figure(figsize=(8, 2.6))
    ax = _styled_axes(fig)
    ax.barh(list(counts.index), counts.values, color=_mpl_hex(brand["primary"]),
            height=0.55, alpha=0.9)
    for i, value in enumerate(counts.values):
        ax.text(value + 0.1, i, str(value), va="center", fontsize=8)
    ax.invert_yaxis()
    ax.set_xlabel("Keywords", fontsize=8)
    _title(ax, "Ranked Keywords by Position", brand)
    fig.tight_layout()
    return fig


def top_keywords_figure(keywords: pd.DataFrame, brand: dict[str, Any], limit: int = 10) -> Figure:
    """Table: best-ranked keywords with volume and month-on-month change."""
    top = keywords.head(limit)
    rows = [
        [kw, str(pos), f"{vol:,}", f"{chg:+d}"]
        for kw, pos, vol, chg in top[["keyword", "position", "volume", "change"]].itertuples(index=False)
    ]

    fig = Figure(figsize=(8, 0.45 * (len(rows) + 2)))
    ax = fig.subplots()
    ax.axis("off")
    table = ax.table(
        cellText=rows,
        colLabels=["Keyword", "Position", "Volume", "Change"],
        colWidths=[0.52, 0.16, 0.16, 0.16],
        loc="upper center",
        cellLoc="left",
    )
    table.auto_set_font_size(False)
    table.set_fontsize(8.5)
    table.scale(1, 1.4)
    for (row, _col), cell in table.get_celld().items():
        cell.set_edgecolor("#DDDDDD")
        if row == 0:
            cell.set_facecolor(_mpl_hex(brand["primary"]))
            cell.get_text().set_color("white")
            cell.get_text().set_fontweight("bold")
    _title(ax, "Top Keywords", brand)
    return fig


def build_surface(
    brand: dict[str, Any],
    section_ids: list[str] | None = None,
    seed: int = 42,
) -> Surface:
    """Build a Surface holding the requested sample sections in order.

    Raises:
        ValueError: If an unknown section id is requested.
    """
    wanted = list(section_ids) if section_ids else list(SECTION_IDS)
    unknown = [s for s in wanted if s not in SECTION_IDS]
    if unknown:
        raise ValueError(f"Unknown section id(s): {', '.join(unknown)}")

    data = generate_dataset(seed=seed)
    builders = {
        "ranking_trend": ("Average Keyword Position",
                          lambda: ranking_trend_figure(data["monthly"], brand)),
        "organic_traffic": ("Organic Sessions",
                            lambda: organic_traffic_figure(data["monthly"], brand)),
        "keyword_buckets": ("Ranked Keywords",
                            lambda: keyword_buckets_figure(data["keywords"], brand)),
        "top_keywords": ("Top Keywords",
                         lambda: top_keywords_figure(data["keywords"], brand)),
    }

    surface = Surface()
    for section_id in wanted:
        title, build = builders[section_id]
        fig = build()
        surface.add(Section(section_id=section_id, figure=fig, title=title,
                            hide_on_export=[live_badge(fig, brand)]))
    logger.info("Built sample surface with %d sections", len(surface))
    return surface
