import io
import zipfile
import logging
from typing import List

import numpy as np
import pandas as pd
from fastapi import UploadFile

from app.exceptions import InvalidLandmarkFile
from app.models.models import Landmark

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (".csv", ".xlsx")


def parse_landmark_table(df: pd.DataFrame) -> List[Landmark]:
    """
    Turn a table with x / y columns (and an optional name column) into landmarks
    """
    columns = {str(col).strip().lower(): col for col in df.columns}

    # Validate required columns
    if "x" not in columns or "y" not in columns:
        raise InvalidLandmarkFile("Landmark table must contain 'x' and 'y' columns")

    if df.empty:
        raise InvalidLandmarkFile("Landmark table has no rows")

    coords = df[[columns["x"], columns["y"]]].apply(pd.to_numeric, errors="coerce")
    values = coords.to_numpy(dtype=float)
    bad_rows = np.where(~np.isfinite(values).all(axis=1))[0]
    if len(bad_rows):
        raise InvalidLandmarkFile(
            f"Landmark table has non-numeric coordinates in rows {bad_rows.tolist()}"
        )

    names = [None] * len(df)
    if "name" in columns:
        names = [None if pd.isna(v) else str(v) for v in df[columns["name"]].tolist()]

    return [
        Landmark(x=float(x), y=float(y), name=name)
        for (x, y), name in zip(values, names)
    ]


async def process_landmark_file(file: UploadFile) -> List[Landmark]:
    """
    Read an uploaded CSV or Excel file and extract the landmarks it lists
    """
    filename = (file.filename or "").lower()
    if not filename.endswith(SUPPORTED_EXTENSIONS):
        raise InvalidLandmarkFile(
            "Unsupported landmark file type",
            f"upload one of: {', '.join(SUPPORTED_EXTENSIONS)}",
        )

    contents = await file.read()
    try:
        if filename.endswith(".csv"):
            df = pd.read_csv(io.BytesIO(contents))
        else:
            # Only the first sheet is read
            df = pd.read_excel(io.BytesIO(contents), sheet_name=0)
    except (ValueError, zipfile.BadZipFile) as e:
        raise InvalidLandmarkFile(f"Error reading landmark file: {e}") from e

    landmarks = parse_landmark_table(df)
    logger.info("Loaded %d landmarks from %s", len(landmarks), file.filename)
    return landmarks
