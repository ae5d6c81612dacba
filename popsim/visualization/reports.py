import os
import json
import re
import pandas as pd
import seaborn as sns
import matplotlib.pyplot as plt

from popsim.metrics.zone_stats import ZoneMetrics


def _slug(label: str) -> str:
    return re.sub(r"[^A-Za-z0-9_-]+", "_", label).strip("_") or "zone"


def zone_metrics_report(metrics: ZoneMetrics, zone_label: str, out_folder: str) -> tuple:
    """
    Save a PNG overview (hourly load, age bands, activity kinds) and a JSON dump of zone metrics.

    Returns:
        (png_path, json_path)
    """
    os.makedirs(out_folder, exist_ok=True)

    fig, axes = plt.subplots(1, 3, figsize=(18, 5))
    hourly = pd.DataFrame({"hour": range(24), "count": metrics.activities_by_hour})
    sns.barplot(data=hourly, x="hour", y="count", color="#8b5cf6", ax=axes[0])
    axes[0].set_title("Activities by Hour")
    axes[0].set_xlabel("Hour of day")
    axes[0].set_ylabel("Activities")

    ages = pd.DataFrame({"band": list(metrics.age_distribution), "count": list(metrics.age_distribution.values())})
    sns.barplot(data=ages, x="band", y="count", color="#3b82f6", ax=axes[1])
    axes[1].set_title("Age Distribution")
    axes[1].set_xlabel("Age band")
    axes[1].set_ylabel("Activities")

    if metrics.activity_type_counts:
        kinds = pd.DataFrame({"kind": list(metrics.activity_type_counts), "count": list(metrics.activity_type_counts.values())})
        sns.barplot(data=kinds, x="kind", y="count", color="#22c55e", ax=axes[2])
    else:
        axes[2].text(0.5, 0.5, "No activities in zone", ha="center", va="center", transform=axes[2].transAxes)
    axes[2].set_title("Activity Types")
    axes[2].set_xlabel("Activity")
    axes[2].set_ylabel("Activities")

    fig.suptitle(f"{zone_label}: {metrics.total_activities} activities, {metrics.unique_visitors} unique visitors")
    plt.tight_layout()
    fig_path = os.path.join(out_folder, f"zone_metrics_{_slug(zone_label)}.png")
    plt.savefig(fig_path, dpi=150, bbox_inches='tight')
    plt.close(fig)

    json_path = os.path.join(out_folder, f"zone_metrics_{_slug(zone_label)}.json")
    with open(json_path, "w") as f:
        json.dump({"zone": zone_label, **metrics.to_dict()}, f, indent=2, ensure_ascii=False)

    print(f"  ✓ Zone report saved: {os.path.basename(fig_path)}, {os.path.basename(json_path)}")
    return fig_path, json_path
