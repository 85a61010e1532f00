"""Stacked bar chart of bucket sizes across snapshots."""

import logging
from pathlib import Path

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402

from roadsnap.models import Bucket, Summary  # noqa: E402

logger = logging.getLogger(__name__)

BUCKET_COLORS = {
    Bucket.DONE: "#00cc00",
    Bucket.OUTSTANDING: "#64505a",
    Bucket.OVERDUE: "#ff0000",
    Bucket.ONGOING: "#0000ff",
}

BAR_WIDTH = 0.6


def draw_bucket_chart(summaries: list[Summary], project: str, output_path: Path) -> Path:
    """Render one stacked bar per snapshot, one segment per bucket, to PNG."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    fig, ax = plt.subplots(figsize=(max(8.1, len(summaries) * 2.0), 5.0))
    labels = [f"{s.snapshot_date:%b %d, %Y}" for s in summaries]
    positions = list(range(len(summaries)))
    bottoms = [0] * len(summaries)

    for bucket in Bucket:
        values = [len(s.items(bucket)) for s in summaries]
        bars = ax.bar(
            positions,
            values,
            BAR_WIDTH,
            bottom=bottoms,
            color=BUCKET_COLORS[bucket],
            label=bucket.value,
        )
        for bar, value, summary in zip(bars, values, summaries):
            if value:
                ax.text(
                    bar.get_x() + bar.get_width() / 2,
                    bar.get_y() + bar.get_height() / 2,
                    f"{bucket.value} ({value}/{summary.all_count()})",
                    ha="center",
                    va="center",
                    color="white",
                    fontsize=8,
                )
        bottoms = [b + v for b, v in zip(bottoms, values)]

    ax.set_title(project)
    ax.set_xticks(positions)
    ax.set_xticklabels(labels)
    ax.set_ylabel("Epics")
    ax.legend(loc="upper left", bbox_to_anchor=(1.0, 1.0))

    fig.savefig(output_path, dpi=100, bbox_inches="tight", transparent=True)
    plt.close(fig)
    logger.info("Wrote chart for %s to %s", project, output_path)
    return output_path
