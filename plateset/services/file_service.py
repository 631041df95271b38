"""Tabular plate file parsing and result table output."""
import io
import logging
from typing import Dict, List, Optional

import pandas as pd

from plateset.config import settings
from plateset.models import PLATE_DIMENSIONS, Plate, Well, encode_row

logger = logging.getLogger(__name__)


def _format_value(value) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class FileService:
    """Service for reading well tables and writing result tables."""

    # Column name mappings
    COLUMN_MAPPING = {
        'well': ['well', 'Well', 'Index', 'index', 'Position', 'Well Position', 'Well ID', 'well_id'],
        'label': ['label', 'Label', 'Plate', 'Plate Label', 'Plate Barcode', 'barcode', 'Barcode'],
    }

    def parse_file(
        self,
        content: bytes,
        filename: str,
        rows: Optional[int] = None,
        columns: Optional[int] = None,
        label: Optional[str] = None
    ) -> Plate:
        """
        Parse uploaded well table and return a Plate.

        Every row names one well; the remaining numeric columns are its
        values. A well listed on several rows collects the values of all of
        them in file order, so long and wide tables both work.

        Args:
            content: File content as bytes
            filename: Original filename
            rows: Plate rows; inferred from the wells when omitted
            columns: Plate columns; inferred from the wells when omitted
            label: Plate label; defaults to the label column or the filename

        Returns:
            Plate with parsed data
        """
        if filename.lower().endswith('.csv'):
            df = self._parse_csv(content)
        elif filename.lower().endswith(('.xlsx', '.xls')):
            df = self._parse_excel(content)
        else:
            raise ValueError(f"Unsupported file format: {filename}")

        column_map = self._detect_columns(df)
        value_columns = [
            col for col in df.columns
            if col not in column_map.values() and pd.api.types.is_numeric_dtype(df[col])
        ]

        wells: Dict[Well, Well] = {}
        for line, row in enumerate(df.itertuples(index=False), start=2):
            record = dict(zip(df.columns, row))

            if label is None and 'label' in column_map:
                cell = record[column_map['label']]
                if not pd.isna(cell):
                    label = str(cell)

            position = record[column_map['well']]
            if pd.isna(position) or not str(position).strip():
                continue

            values = [record[col] for col in value_columns if not pd.isna(record[col])]
            try:
                well = Well(str(position), data=values)
            except ValueError as e:
                raise ValueError(f"Line {line}: {e}")

            if well in wells:
                wells[well].add(well)
            else:
                wells[well] = well

        if not wells:
            raise ValueError("No wells found in file.")
        logger.info(f"Parsed {len(wells)} wells from {filename}")

        if rows is None or columns is None:
            rows, columns = self._infer_dimensions(list(wells))
        return Plate(rows, columns, label or filename.rsplit('.', 1)[0], list(wells))

    def _parse_csv(self, content: bytes) -> pd.DataFrame:
        """Parse CSV file."""
        # Try different encodings
        for encoding in ['utf-8', 'latin1']:
            try:
                return pd.read_csv(io.BytesIO(content), encoding=encoding)
            except UnicodeDecodeError:
                continue
        raise ValueError("Unable to decode CSV file.")

    def _parse_excel(self, content: bytes) -> pd.DataFrame:
        """Parse Excel file."""
        # Use the first sheet with a well column
        xl = pd.ExcelFile(io.BytesIO(content))

        for sheet_name in xl.sheet_names:
            df = pd.read_excel(xl, sheet_name=sheet_name)
            if self._has_required_columns(df):
                return df

        return pd.read_excel(io.BytesIO(content))

    def _has_required_columns(self, df: pd.DataFrame) -> bool:
        """Check if dataframe has a well column."""
        columns_lower = [str(c).lower() for c in df.columns]
        return any(alias.lower() in columns_lower for alias in self.COLUMN_MAPPING['well'])

    def _detect_columns(self, df: pd.DataFrame) -> dict:
        """Detect column mappings."""
        column_map = {}

        for standard_name, aliases in self.COLUMN_MAPPING.items():
            for col in df.columns:
                if col in aliases or str(col).lower() in [a.lower() for a in aliases]:
                    column_map[standard_name] = col
                    break

        if 'well' not in column_map:
            raise ValueError("Missing required column: Well")

        return column_map

    def _infer_dimensions(self, wells: List[Well]):
        """Smallest preset plate holding every well, else the bounding box."""
        max_row = max(well.row for well in wells)
        max_column = max(well.column for well in wells)
        for rows, columns in sorted(PLATE_DIMENSIONS.values()):
            if max_row < rows and max_column <= columns:
                return rows, columns
        return max_row + 1, max_column

    # Output

    def result_table(
        self,
        results: Dict[Well, float],
        label: str = "Result",
        delimiter: Optional[str] = None
    ) -> str:
        """Label line, an ``Index``/``Value`` header, then one line per well in well order."""
        delimiter = delimiter or settings.table_delimiter
        df = pd.DataFrame(
            [(well.index, _format_value(results[well])) for well in sorted(results)],
            columns=['Index', 'Value']
        )
        return label + "\n" + df.to_csv(sep=delimiter, index=False, lineterminator="\n")

    def plate_map(
        self,
        results: Dict[Well, float],
        rows: int,
        columns: int,
        label: str = "Result",
        delimiter: Optional[str] = None
    ) -> str:
        """
        Lay results out as a grid of row letters by column numbers.

        Positions without a result are written as ``Null``.
        """
        delimiter = delimiter or settings.table_delimiter
        df = pd.DataFrame(
            "Null",
            index=[encode_row(row) for row in range(rows)],
            columns=list(range(1, columns + 1))
        )
        for well, value in results.items():
            if well.row >= rows or well.column > columns:
                raise ValueError(f"Well {well.index} lies outside a {rows}x{columns} plate.")
            df.loc[well.row_string, well.column] = _format_value(value)
        return label + "\n" + df.to_csv(sep=delimiter, lineterminator="\n")
