from typing import List

import pytest

from tests import make_history
from vital_brief.service.insight_analysis.common.data_models import DailyRecord


@pytest.fixture
def history() -> List[DailyRecord]:
    """Four weeks of fully populated records."""
    return make_history()
