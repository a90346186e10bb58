"""
Time-bucketed aggregation store for rate samples.

Samples are persisted in one file per calendar day
(``traffic_<YYYY-MM-DD>.json``) holding the day's ordered record list and
its aggregates. Weekly and monthly rollups are never written; they are
derived from the day files at read time, so they cannot drift from the
underlying data but also cannot see days removed by retention.

The store performs unlocked read-modify-write cycles and assumes a single
writer process per data directory.
"""

import logging
import time
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Union

from ..models.buckets import DayBucket, MonthRollup, WeekRollup
from ..models.samples import RateSample
from ..validation import (
    ErrorSeverity,
    StorageIOError,
    handle_file_error,
    validate_iso_week,
    validate_positive_integer,
    validate_year_month,
)
from .aggregation import merge_summaries, recompute
from .base import DataStorage
from .json_storage import JsonStorage

logger = logging.getLogger(__name__)

FILE_PREFIX = "traffic_"

DateLike = Union[date, datetime, str]


def to_date(value: DateLike) -> date:
    """Normalize a date, datetime or ISO date string to a date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


class TrafficStore:
    """
    Persists day buckets and serves day/week/month/recent views.

    Attributes:
        data_dir: Directory holding the day files.
        storage: Backend used to read, write and delete files.
        today: Callable returning the current local date; injectable for tests.
    """

    def __init__(
        self,
        data_dir: Union[str, Path],
        storage: Optional[DataStorage] = None,
        today: Callable[[], date] = date.today,
    ):
        self.data_dir = Path(data_dir)
        self.storage = storage or JsonStorage()
        self.today = today

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    def path_for(self, day: DateLike) -> Path:
        """Path of the file holding the bucket for ``day``."""
        return self.data_dir / f"{FILE_PREFIX}{to_date(day).isoformat()}.{self.storage.extension}"

    def ensure_data_dir(self) -> None:
        """Create the data directory if it does not exist yet."""
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageIOError(
                f"Cannot create data directory {self.data_dir}: {e}", path=str(self.data_dir)
            ) from e

    def _parse_file_date(self, filename: str) -> Optional[date]:
        suffix = f".{self.storage.extension}"
        if not filename.startswith(FILE_PREFIX) or not filename.endswith(suffix):
            return None
        try:
            return date.fromisoformat(filename[len(FILE_PREFIX):-len(suffix)])
        except ValueError:
            return None

    def list_dates(self) -> List[date]:
        """
        Dates of every persisted day bucket, ascending.

        Raises:
            StorageIOError: If the data directory cannot be enumerated
        """
        if not self.data_dir.exists():
            return []
        try:
            names = self.storage.list_files(str(self.data_dir))
        except OSError as e:
            raise StorageIOError(
                f"Cannot list data directory {self.data_dir}: {e}", path=str(self.data_dir)
            ) from e
        return sorted(d for d in (self._parse_file_date(n) for n in names) if d is not None)

    # ------------------------------------------------------------------
    # Writing
    # ------------------------------------------------------------------

    def _read_bucket(self, path: Path) -> DayBucket:
        try:
            data = self.storage.load_dict(str(path))
        except OSError as e:
            raise StorageIOError(f"Cannot read {path}: {e}", path=str(path)) from e
        except ValueError as e:
            raise StorageIOError(f"Corrupt day bucket {path}: {e}", path=str(path)) from e
        try:
            return DayBucket.from_dict(data)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise StorageIOError(f"Malformed day bucket {path}: {e}", path=str(path)) from e

    def _quarantine(self, path: Path) -> None:
        aside = path.with_name(f"{path.name}.corrupt-{int(time.time())}")
        try:
            path.rename(aside)
        except OSError as e:
            raise StorageIOError(
                f"Cannot move corrupt bucket {path} aside: {e}", path=str(path)
            ) from e
        logger.warning(f"Moved corrupt day bucket {path} to {aside}; starting a new bucket")

    def _load_for_update(self, date_key: str) -> DayBucket:
        path = self.path_for(date_key)
        if not self.storage.file_exists(str(path)):
            logger.info(f"Creating new day bucket for {date_key}")
            return DayBucket(date=date_key)
        try:
            return self._read_bucket(path)
        except StorageIOError as e:
            if isinstance(e.__cause__, OSError):
                raise
            self._quarantine(path)
            return DayBucket(date=date_key)

    def _write_bucket(self, bucket: DayBucket) -> None:
        path = self.path_for(bucket.date)
        try:
            self.storage.save_dict(bucket.to_dict(), str(path))
        except (OSError, TypeError, ValueError) as e:
            raise StorageIOError(f"Cannot write {path}: {e}", path=str(path)) from e

    def append(self, sample: RateSample) -> DayBucket:
        """
        Append one sample to its day's bucket and persist the bucket.

        The bucket's aggregates are recomputed over the full record list.

        Returns:
            The updated bucket

        Raises:
            StorageIOError: If the bucket cannot be read or written
        """
        return self.append_many([sample])[0]

    def append_many(self, samples: Iterable[RateSample]) -> List[DayBucket]:
        """
        Append samples in order, with one read-modify-write per affected day.

        Returns:
            The updated buckets, in the order their days were first seen

        Raises:
            StorageIOError: If a bucket cannot be read or written
        """
        grouped: Dict[str, List[RateSample]] = {}
        for sample in samples:
            grouped.setdefault(sample.date_key, []).append(sample)
        if not grouped:
            return []

        self.ensure_data_dir()
        updated = []
        for date_key, day_samples in grouped.items():
            bucket = self._load_for_update(date_key)
            bucket.records.extend(day_samples)
            recompute(bucket)
            self._write_bucket(bucket)
            logger.debug(
                f"Appended {len(day_samples)} samples to {date_key} "
                f"({len(bucket.records)} records)"
            )
            updated.append(bucket)
        return updated

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def get_day(self, day: DateLike) -> Optional[DayBucket]:
        """
        Load the bucket for an exact date.

        Returns:
            The bucket, or None when no data exists for that date

        Raises:
            StorageIOError: If the file exists but cannot be read or parsed
        """
        path = self.path_for(day)
        if not self.storage.file_exists(str(path)):
            return None
        return self._read_bucket(path)

    def _collect(self, days: Iterable[date]) -> List[DayBucket]:
        buckets = []
        for day in days:
            bucket = self.get_day(day)
            if bucket is not None:
                buckets.append(bucket)
        return buckets

    def get_week(self, iso_year: int, iso_week: int) -> WeekRollup:
        """
        Roll up the ISO-8601 week (Monday to Sunday).

        Days without data are treated as empty.

        Raises:
            ValidationError: If the week does not exist
        """
        start = validate_iso_week(iso_year, iso_week)
        end = start + timedelta(days=6)
        rollup = WeekRollup(
            week=f"{int(iso_year)}-W{int(iso_week):02d}",
            start_date=start.isoformat(),
            end_date=end.isoformat(),
        )
        for bucket in self._collect(start + timedelta(days=d) for d in range(7)):
            rollup.days.append(bucket)
            rollup.total_bytes_in += bucket.total_bytes_in
            rollup.total_bytes_out += bucket.total_bytes_out
            merge_summaries(rollup.summary, bucket.summary)
            merge_summaries(rollup.class_summary, bucket.class_summary)
        return rollup

    def get_month(self, year: int, month: int) -> MonthRollup:
        """
        Roll up a calendar month.

        Every ISO week overlapping the month is included in ``weeks``; a week
        spanning a month boundary therefore appears in both months.
        """
        first = validate_year_month(year, month)
        next_first = (first.replace(day=28) + timedelta(days=4)).replace(day=1)
        month_days = [first + timedelta(days=d) for d in range((next_first - first).days)]

        rollup = MonthRollup(month=f"{first.year}-{first.month:02d}")
        for bucket in self._collect(month_days):
            rollup.days.append(bucket)
            rollup.total_bytes_in += bucket.total_bytes_in
            rollup.total_bytes_out += bucket.total_bytes_out
            merge_summaries(rollup.summary, bucket.summary)
            merge_summaries(rollup.class_summary, bucket.class_summary)

        weeks = []
        for day in month_days:
            iso = day.isocalendar()
            key = (iso[0], iso[1])
            if key not in weeks:
                weeks.append(key)
        rollup.weeks = [self.get_week(y, w) for y, w in weeks]
        return rollup

    def get_recent(self, n: int) -> List[DayBucket]:
        """
        Buckets for today and the n-1 days before it that have data.

        Returns:
            Up to n buckets sorted ascending by date
        """
        if n <= 0:
            return []
        today = self.today()
        buckets = self._collect(today - timedelta(days=i) for i in range(n))
        return sorted(buckets, key=lambda b: b.date)

    # ------------------------------------------------------------------
    # Retention
    # ------------------------------------------------------------------

    def prune(self, retention_days: int) -> List[date]:
        """
        Delete every bucket dated strictly before ``today - retention_days``.

        Today's bucket is never deleted. A file that cannot be removed is
        logged and skipped.

        Returns:
            Dates of the buckets that were deleted

        Raises:
            StorageIOError: If the data directory cannot be enumerated
        """
        retention_days = validate_positive_integer(
            retention_days, min_value=0, field_name="retention_days"
        )
        cutoff = self.today() - timedelta(days=retention_days)

        removed = []
        for day in self.list_dates():
            if day >= cutoff:
                continue
            path = self.path_for(day)
            try:
                self.storage.delete(str(path))
            except OSError as e:
                handle_file_error(
                    error=e,
                    context=f"removing old day bucket {path}",
                    severity=ErrorSeverity.WARNING,
                    reraise=False,
                    logger=logger,
                )
                continue
            removed.append(day)

        if removed:
            logger.info(
                f"Pruned {len(removed)} day buckets older than {cutoff.isoformat()}"
            )
        return removed
