# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 GeoStream Team

"""
GeoDataFrame feature driver.

Streams a ``geopandas.GeoDataFrame`` as a dataset: one feature per row,
attribute kinds taken from column dtypes, geometries through the shapely
driver.
"""

import datetime as _dt
import logging
from typing import Any, Dict, Optional

import geopandas as gpd
import numpy as np
import pandas as pd
from shapely.geometry.base import BaseGeometry

from geostream.api.processor import FeatureProcessor
from geostream.api.values import FLOAT_KINDS, ColumnType, ColumnValue
from geostream.core.exceptions import ValidationError
from geostream.native.shapely_reader import process_shapely_geom

logger = logging.getLogger(__name__)

DTYPE_KINDS: Dict[type, ColumnType] = {
    np.int8: ColumnType.BYTE,
    np.uint8: ColumnType.UBYTE,
    np.bool_: ColumnType.BOOL,
    np.int16: ColumnType.SHORT,
    np.uint16: ColumnType.USHORT,
    np.int32: ColumnType.INT,
    np.uint32: ColumnType.UINT,
    np.int64: ColumnType.LONG,
    np.uint64: ColumnType.ULONG,
    np.float32: ColumnType.FLOAT,
    np.float64: ColumnType.DOUBLE,
}


def column_kind(series: pd.Series) -> Optional[ColumnType]:
    """
    Attribute kind for a column, or None when values must be inspected one by one.

    Nullable extension dtypes (``Int64``, ``boolean``, ...) map through their
    numpy counterpart.
    """
    if pd.api.types.is_datetime64_any_dtype(series.dtype):
        return ColumnType.DATETIME
    dtype = getattr(series.dtype, 'numpy_dtype', series.dtype)
    if isinstance(dtype, np.dtype):
        return DTYPE_KINDS.get(dtype.type)
    return None


def to_column_value(kind: Optional[ColumnType], value: Any) -> Optional[ColumnValue]:
    """
    Typed value for one cell; None for missing cells.

    Object cells are inferred one by one. Durations become ISO 8601 text and
    geometries from secondary geometry columns become WKT. Cells of any other
    unsupported type are skipped.
    """
    if value is None or (pd.api.types.is_scalar(value) and pd.isna(value)):
        return None
    if kind is None:
        if isinstance(value, (_dt.timedelta, np.timedelta64)):
            return ColumnValue(ColumnType.STRING, pd.Timedelta(value).isoformat())
        if isinstance(value, BaseGeometry):
            return ColumnValue(ColumnType.STRING, value.wkt)
        if isinstance(value, np.generic):
            value = value.item()
        try:
            return ColumnValue.from_python(value)
        except ValidationError as e:
            logger.debug("Skipping cell of type %s: %s", type(value).__name__, e)
            return None
    if kind is ColumnType.DATETIME:
        return ColumnValue(kind, pd.Timestamp(value).isoformat())
    if kind is ColumnType.BOOL:
        return ColumnValue(kind, bool(value))
    if kind in FLOAT_KINDS:
        return ColumnValue(kind, float(value))
    return ColumnValue(kind, int(value))


def process_geodataframe(
    gdf: gpd.GeoDataFrame,
    processor: FeatureProcessor,
    name: Optional[str] = None,
) -> None:
    """
    Drive a GeoDataFrame as one dataset.

    Missing cells are skipped, so property indices stay contiguous. Rows
    without a geometry produce an empty geometry block.

    Args:
        gdf: Source frame; its active geometry column supplies geometries
        processor: Sink receiving the events
        name: Optional dataset name
    """
    geometry_name = gdf.geometry.name
    columns = [col for col in gdf.columns if col != geometry_name]
    kinds = {col: column_kind(gdf[col]) for col in columns}
    values = {col: gdf[col].to_numpy(dtype=object) for col in columns}
    geometries = gdf.geometry.to_numpy()

    processor.dataset_begin(name)
    for idx in range(len(gdf)):
        processor.feature_begin(idx)
        if columns:
            processor.properties_begin()
            i = 0
            for col in columns:
                value = to_column_value(kinds[col], values[col][idx])
                if value is None:
                    continue
                stop = processor.property(i, str(col), value)
                i += 1
                if stop:
                    break
            processor.properties_end()
        processor.geometry_begin()
        geom = geometries[idx]
        if geom is not None:
            process_shapely_geom(geom, processor, 0)
        processor.geometry_end()
        processor.feature_end(idx)
    processor.dataset_end()
    logger.debug("Processed GeoDataFrame %r with %d features", name, len(gdf))


class GeoDataFrameSource:
    """GeoDataFrame acting as a feature source."""

    def __init__(self, gdf: gpd.GeoDataFrame, name: Optional[str] = None):
        self.gdf = gdf
        self.name = name

    def process(self, processor: FeatureProcessor) -> None:
        process_geodataframe(self.gdf, processor, self.name)
