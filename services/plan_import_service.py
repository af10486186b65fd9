"""
Import of directional plan exports (CSV / TSV text) into plan stations
"""
import io
import re
import logging
from pathlib import Path
from typing import Dict, List, Optional
import pandas as pd
from models.survey_schemas import PlanImportResult, PlanStation

logger = logging.getLogger(__name__)


class PlanImportError(ValueError):
    """Base class for plan import failures"""


class EmptyFileError(PlanImportError):
    def __init__(self):
        super().__init__("The file is empty.")


class NoDataRowsError(PlanImportError):
    def __init__(self):
        super().__init__("No data rows found in the file.")


class MissingColumnsError(PlanImportError):
    def __init__(self, missing: List[str]):
        self.missing = missing
        super().__init__(f"Missing required columns: {', '.join(missing)}")


# Header aliases per field; matched case-insensitively after normalization
COLUMN_VARIANTS = {
    'md': ["MD", "MD(m)", "MD (m)", "Measured Depth", "Meas Depth", "Depth"],
    'inc': ["Inc", "Incl", "Incl (°)", "Inc(deg)", "Inc (deg)", "INCL", "INCL (°)",
            "Inclination", "Inclination (deg)", "Inclination (°)"],
    'azi': ["Azi", "Azm", "Azim", "Azim (°)", "Azi(deg)", "Azm(deg)", "Azi (deg)", "Azm (deg)",
            "AZI", "AZI (°)", "Azimuth", "Azimuth (deg)", "Azimuth (°)"],
    'tvd': ["TVD", "TVD(m)", "TVD (m)", "True Vertical Depth"],
    'ns': ["NS", "NS(m)", "NS (m)", "North-South", "North", "N/S", "+N/-S"],
    'ew': ["EW", "EW(m)", "EW (m)", "East-West", "East", "E/W", "+E/-W"],
    'vs': ["VS", "VS(m)", "VS (m)", "Vertical Section"],
}

REQUIRED_COLUMNS = {
    'md': "MD",
    'inc': "Inc/Inclination",
    'azi': "Azi/Azimuth",
    'tvd': "TVD",
    'ns': "NS/North-South",
    'ew': "EW/East-West",
}

VS_AZIMUTH_PATTERNS = [
    r"Vertical Section Azimuth[:\s]+([\d.]+)",
    r"VS Azimuth[:\s]+([\d.]+)",
    r"VSD[:\s]+([\d.]+)",
    r"V\.S\. Azimuth[:\s]+([\d.]+)",
]


def normalize_header(header: str) -> str:
    """Strip BOM, turn embedded newlines into spaces and collapse whitespace"""
    header = str(header).replace("\ufeff", "")
    return re.sub(r"\s+", " ", header).strip()


def find_column(columns: List[str], variants: List[str]) -> Optional[str]:
    wanted = {normalize_header(v).lower() for v in variants}
    for column in columns:
        if normalize_header(column).lower() in wanted:
            return column
    return None


def parse_vs_azimuth(text: str) -> Optional[float]:
    """Vertical section azimuth from metadata such as 'Vertical Section Azimuth: 285.761 °'"""
    for pattern in VS_AZIMUTH_PATTERNS:
        match = re.search(pattern, text, re.IGNORECASE)
        if match:
            try:
                return float(match.group(1))
            except ValueError:
                continue
    return None


def to_numeric(values: pd.Series) -> pd.Series:
    """Parse cells as floats, dropping thousands separators; unparsable cells become NaN"""
    cleaned = values.astype(str).str.strip().str.replace(",", "", regex=False)
    return pd.to_numeric(cleaned, errors="coerce")


class PlanImportService:
    """Service for turning delimited plan text into sorted plan stations"""

    def import_plan(self, text: str, file_name: str) -> PlanImportResult:
        """
        Parse a directional plan export

        Args:
            text: CSV or tab separated text content
            file_name: Original file name, used for the plan name

        Returns:
            PlanImportResult with stations sorted by MD

        Raises:
            EmptyFileError, NoDataRowsError, MissingColumnsError
        """
        if not text or not text.strip():
            raise EmptyFileError()

        frame = self._read_table(text)
        if frame.empty:
            raise NoDataRowsError()

        column_map = self._build_column_map(list(frame.columns))
        missing = [label for key, label in REQUIRED_COLUMNS.items() if column_map[key] is None]
        if missing:
            raise MissingColumnsError(missing)

        values = pd.DataFrame({key: to_numeric(frame[column])
                               for key, column in column_map.items() if column is not None})

        # Rows with any missing/invalid required value are skipped
        usable = values.dropna(subset=list(REQUIRED_COLUMNS))
        skipped = len(values) - len(usable)
        if skipped:
            logger.debug(f"Skipped {skipped} plan rows with missing or invalid values")
        if usable.empty:
            raise NoDataRowsError()

        usable = usable.sort_values('md', kind='stable')
        stations = [self._to_station(row) for row in usable.to_dict('records')]

        name = Path(file_name).stem if file_name else ""
        result = PlanImportResult(
            stations=stations,
            name=name or "Imported Plan",
            source_file_name=file_name,
            vs_azimuth_deg=parse_vs_azimuth(text)
        )

        logger.info(f"Imported {len(stations)} plan stations from {file_name or 'text'}")

        return result

    def _read_table(self, text: str) -> pd.DataFrame:
        is_tab_separated = "\t" in text and len(text.split("\t")) > 3
        sep = "\t" if is_tab_separated else ","

        # Drop comment and blank lines; the first remaining line is the header
        lines = [line for line in text.splitlines()
                 if line.strip() and not line.strip().startswith("#")]
        if len(lines) < 2:
            return pd.DataFrame()

        content = "\n".join(lines)
        width = len(pd.read_csv(io.StringIO(content), sep=sep, dtype=str, nrows=0).columns)

        # Fields past the header width are ignored, not the whole row
        frame = pd.read_csv(
            io.StringIO(content),
            sep=sep,
            dtype=str,
            keep_default_na=False,
            index_col=False,
            skipinitialspace=True,
            engine="python",
            on_bad_lines=lambda fields: fields[:width]
        )
        frame.columns = [normalize_header(c) for c in frame.columns]
        return frame

    def _build_column_map(self, columns: List[str]) -> Dict[str, Optional[str]]:
        return {key: find_column(columns, variants) for key, variants in COLUMN_VARIANTS.items()}

    def _to_station(self, row: Dict[str, float]) -> PlanStation:
        vs = row.get('vs')
        return PlanStation(
            md=row['md'],
            inc=row['inc'],
            azi=row['azi'],
            tvd=row['tvd'],
            ns_m=row['ns'],
            ew_m=row['ew'],
            vs_m=None if vs is None or pd.isna(vs) else vs
        )
