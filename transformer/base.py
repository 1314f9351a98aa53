"""Abstract base class for timetable transformers."""

from abc import ABC, abstractmethod
from datetime import date
from typing import Any, Optional

from timetable.models import Timetable


class BaseTransformer(ABC):
    """Abstract base class defining the interface for timetable transformers.

    Extend this class to export the weekly timetable to other formats
    (e.g., iCalendar, JSON, a cron table).
    """

    @abstractmethod
    def transform(
        self,
        timetable: Timetable,
        start_date: date,
        end_date: Optional[date] = None
    ) -> Any:
        """Transform the weekly timetable into the target format.

        Args:
            timetable: Weekly schedule to export.
            start_date: First day the recurring events apply to.
            end_date: Last day the events recur on, or None for no end.

        Returns:
            Transformed data in the target format.
        """
        pass

    @abstractmethod
    def save(self, output_path: str) -> None:
        """Save the transformed data to a file.

        Args:
            output_path: Path to the output file.
        """
        pass
