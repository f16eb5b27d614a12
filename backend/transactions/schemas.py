from datetime import datetime

from common_schemas import DateWindow
from money import utcnow


class PeriodQuery(DateWindow):
    """Reporting window; defaults to 1 January of the current year up to now."""

    def resolved(self):
        now = utcnow()
        start = self.start_date or datetime(now.year, 1, 1)
        end = self.end_date or now
        return start, end
