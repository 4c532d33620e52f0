import logging
from typing import IO, List, Optional, Union

import pandas as pd

from domain.entities.meeting import Meeting
from domain.exceptions import InvalidInputError
from shared.shared import TRUST_DIMENSIONS

logger = logging.getLogger(__name__)

ESSENTIAL_COLUMNS = ["initiator_name", "subject_name", "rating"]

# Column aliases accepted from exported meeting sheets
COLUMN_ALIASES = {
    "my_name": "initiator_name",
    "other_name": "subject_name",
    "Initiator": "initiator_name",
    "Subject": "subject_name",
    "Rating": "rating",
    "Location": "location",
    "Date": "created_at",
}


class MeetingCSVLoader:
    """Loads meetings from CSV, dropping rows with missing essential data"""

    def __init__(self, source: Union[str, IO]):
        self.source = source
        self.df: Optional[pd.DataFrame] = None
        self.skipped_rows = 0

    def load_data(self) -> pd.DataFrame:
        self.df = pd.read_csv(self.source, dtype=str, keep_default_na=True)
        self.df = self.df.rename(columns=COLUMN_ALIASES)
        original_count = len(self.df)
        logger.info(f"Loaded {original_count} meeting rows")

        self.df = self.filter_incomplete_rows(self.df)
        removed_count = original_count - len(self.df)
        if removed_count:
            logger.info(f"Filtered out {removed_count} rows with missing essential data")
        self.skipped_rows = removed_count
        return self.df

    def filter_incomplete_rows(self, df: pd.DataFrame) -> pd.DataFrame:
        missing_columns = [col for col in ESSENTIAL_COLUMNS if col not in df.columns]
        if missing_columns:
            raise InvalidInputError(
                f"CSV is missing required columns: {missing_columns}",
                field=missing_columns[0],
            )

        mask = pd.Series([True] * len(df), index=df.index)
        for column in ESSENTIAL_COLUMNS:
            column_mask = df[column].notna() & (df[column].astype(str).str.strip() != "")
            mask = mask & column_mask

            filtered_by_column = (~column_mask).sum()
            if filtered_by_column > 0:
                logger.info(f"   • {column}: {filtered_by_column} rows have empty values")

        return df[mask].copy()

    def load_meetings(self, user_id: str = None, community_id: str = None) -> List[Meeting]:
        """Validated meetings; rows that fail validation are logged and skipped"""
        df = self.df if self.df is not None else self.load_data()
        known = set(ESSENTIAL_COLUMNS + TRUST_DIMENSIONS) | {
            "id",
            "location",
            "created_at",
            "user_id",
            "community_id",
            "detailed_feedback",
        }
        columns = [col for col in df.columns if col in known]

        meetings = []
        for row_number, row in zip(df.index, df[columns].to_dict(orient="records")):
            data = {key: (None if pd.isna(value) else value) for key, value in row.items()}
            if user_id is not None:
                data["user_id"] = user_id
            if community_id is not None and not data.get("community_id"):
                data["community_id"] = community_id
            try:
                meetings.append(Meeting.from_dict(data))
            except InvalidInputError as e:
                self.skipped_rows += 1
                logger.warning(f"Skipping CSV row {row_number}: {e}")

        logger.info(f"Parsed {len(meetings)} meetings, skipped {self.skipped_rows} rows")
        return meetings
