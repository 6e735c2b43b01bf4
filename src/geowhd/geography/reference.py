"""
Reference file loading

Reads the static county and MSA assignment tables configured in
ReferenceSettings and hands them to the Geography Builder.
"""
import logging
from pathlib import Path
from typing import Optional

import pandas as pd

from geowhd.config import ReferenceSettings, settings
from geowhd.exceptions import MissingReferenceError
from geowhd.geography.builder import Geography, build_geography

logger = logging.getLogger(__name__)


def read_reference_table(path: str) -> pd.DataFrame:
    """
    Read a reference CSV keeping every field as text

    FIPS and area codes carry leading zeros, so nothing is type-inferred.
    """
    file_path = Path(path)
    if not file_path.exists():
        raise MissingReferenceError(f"Reference file not found: {file_path}")
    logger.info(f"Reading reference table {file_path}")
    return pd.read_csv(file_path, dtype=str, keep_default_na=False, encoding='utf-8')


def load_reference_geography(reference: Optional[ReferenceSettings] = None) -> Geography:
    """Build the geography from the configured reference files"""
    reference = reference or settings.reference
    county_rows = read_reference_table(reference.county_path)
    msa_rows = read_reference_table(reference.msa_path)
    office_rows = read_reference_table(reference.office_path) if reference.office_path else None
    return build_geography(county_rows, msa_rows, office_rows)
