"""
Visualization functions for site index curves.
"""
import matplotlib.pyplot as plt
import seaborn as sns

from .curves import AgeType
from .engine import get_engine
from .tables import height_age_table

# Set default style
try:
    plt.style.use('seaborn-v0_8')
except OSError:
    plt.style.use('default')

sns.set_palette("husl")


def plot_height_table(table, title=None, age_type=AgeType.BREAST, save_path=None):
    """Plot one line per site index from a height-age table.

    Args:
        table: DataFrame from ``tables.height_age_table``
        title: Optional plot title
        age_type: Age type of the table index, for the axis label
        save_path: Optional path to save the plot

    Returns:
        The matplotlib Figure
    """
    long = table.reset_index().melt(id_vars='age', var_name='site_index', value_name='height')
    long = long.dropna()

    fig, ax = plt.subplots(figsize=(10, 6))
    sns.lineplot(data=long, x='age', y='height', hue='site_index', palette='husl', ax=ax)

    label = 'Breast-height age (years)' if age_type == AgeType.BREAST else 'Total age (years)'
    ax.set_xlabel(label)
    ax.set_ylabel('Height (m)')
    if title:
        ax.set_title(title)
    ax.legend(title='Site index (m)')
    ax.grid(True)

    plt.tight_layout()
    if save_path:
        fig.savefig(save_path, dpi=300, bbox_inches='tight')
    return fig


def plot_site_curves(curve, site_indices=(10, 15, 20, 25, 30, 35), max_age=150,
                     age_type=AgeType.BREAST, engine=None, save_path=None):
    """Plot height-age curves of one site index curve.

    Args:
        curve: Curve index
        site_indices: Site indices (m) to draw
        max_age: Last age plotted
        age_type: Age type along the x axis
        engine: Engine to use (default engine if omitted)
        save_path: Optional path to save the plot

    Returns:
        The matplotlib Figure
    """
    engine = engine or get_engine()
    table = height_age_table(curve, site_indices, range(1, max_age + 1), age_type,
                             engine=engine)
    title = f"{engine.curve_name(curve)} ({engine.curve(curve).key})"
    return plot_height_table(table, title=title, age_type=age_type, save_path=save_path)
