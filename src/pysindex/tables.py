"""
Height-age and site index tables.

These build pandas DataFrames over a grid of inputs by calling the engine
once per cell. Cells where the engine reports an error hold NaN, so a table
over a curve's whole range can be built without the caller filtering the
inputs first.
"""
from typing import Iterable, Optional

import numpy as np
import pandas as pd

from .curves import AgeType, CurveLike, CurveUse, EstimationMode
from .engine import SiteIndexEngine, get_engine
from .exceptions import ComputationError, validate_proportion
from .logging_config import get_logger

logger = get_logger(__name__)

GROWTH_INTERCEPT_Y2BH = 0.5


def _y2bh(engine: SiteIndexEngine, curve: CurveLike, site_index: float) -> float:
    if engine.curve(curve).is_growth_intercept:
        return GROWTH_INTERCEPT_Y2BH
    return engine.si_y2bh_rounded(curve, site_index)


def height_age_table(
    curve: CurveLike,
    site_indices: Iterable[float],
    ages: Iterable[float],
    age_type: AgeType = AgeType.BREAST,
    pi: float = 0.5,
    engine: Optional[SiteIndexEngine] = None,
) -> pd.DataFrame:
    """
    Tabulate height over age for a set of site indices on one curve.

    Years to breast height for each column come from the curve's own
    rounded estimate.

    Args:
        curve: Curve index
        site_indices: Site indices (m), one column each
        ages: Ages, one row each
        age_type: How ``ages`` are counted
        pi: Proportion of the first growing season below breast height
        engine: Engine to use (default engine if omitted)

    Returns:
        DataFrame indexed by age with one column per site index, heights in
        metres and NaN where the curve has no answer
    """
    engine = engine or get_engine()
    validate_proportion(pi, 'pi')
    engine.curve(curve)

    ages = [float(a) for a in ages]
    columns = {}
    for site_index in site_indices:
        try:
            y2bh = _y2bh(engine, curve, site_index)
        except ComputationError as e:
            logger.debug("No years to breast height for site index %g: %s", site_index, e)
            columns[float(site_index)] = np.full(len(ages), np.nan)
            continue

        heights = []
        for age in ages:
            try:
                heights.append(engine.index_to_height(curve, age, age_type, site_index, y2bh, pi))
            except ComputationError:
                heights.append(np.nan)
        columns[float(site_index)] = np.array(heights)

    table = pd.DataFrame(columns, index=pd.Index(ages, name='age'))
    table.columns.name = 'site_index'
    return table


def site_index_table(
    curve: CurveLike,
    heights: Iterable[float],
    ages: Iterable[float],
    age_type: AgeType = AgeType.BREAST,
    estimation_mode: EstimationMode = EstimationMode.ITERATE,
    engine: Optional[SiteIndexEngine] = None,
) -> pd.DataFrame:
    """Tabulate site index over age for a set of measured heights."""
    engine = engine or get_engine()
    engine.curve(curve)

    ages = [float(a) for a in ages]
    columns = {}
    for height in heights:
        values = []
        for age in ages:
            try:
                values.append(engine.height_to_index(curve, age, age_type, height, estimation_mode))
            except ComputationError:
                values.append(np.nan)
        columns[float(height)] = np.array(values)

    table = pd.DataFrame(columns, index=pd.Index(ages, name='age'))
    table.columns.name = 'height'
    return table


def curve_summary(engine: Optional[SiteIndexEngine] = None) -> pd.DataFrame:
    """One row per loaded curve: id, key, name, species, family and uses."""
    engine = engine or get_engine()
    records = []
    for definition in engine.catalog.curves():
        records.append({
            'id': definition.id,
            'key': definition.key,
            'name': definition.name,
            'species': definition.species,
            'family': definition.family,
            'breast_height': definition.breast_height,
            'uses': '|'.join(flag.name for flag in CurveUse if flag and flag in definition.uses),
        })
    return pd.DataFrame(records)


def age_at_height(table: pd.DataFrame, site_index: float, target_height: float) -> Optional[float]:
    """
    Interpolate the age at which a tabulated curve reaches a height.

    Args:
        table: Output of ``height_age_table``
        site_index: Column to read
        target_height: Height (m)

    Returns:
        Interpolated age, or None if the column never reaches the height
    """
    column = table[float(site_index)].dropna()
    if column.empty or target_height > column.iloc[-1]:
        return None
    if target_height <= column.iloc[0]:
        return float(column.index[0])
    return float(np.interp(target_height, column.values, column.index.values))
