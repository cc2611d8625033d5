from functools import cached_property

from vital_brief.config import VitalBriefSettings
from vital_brief.service.briefing_service import BriefingService
from vital_brief.service.daily_record_source import DailyRecordSource, MockDailyRecordSource
from vital_brief.service.garmin_record_source import GarminDailyRecordSource
from vital_brief.service.record_store import DailyRecordStore


class ServiceFactory:
    def __init__(self, settings: VitalBriefSettings):
        self.settings = settings

    @cached_property
    def record_store(self) -> DailyRecordStore:
        return DailyRecordStore(self.settings.db_path)

    @cached_property
    def record_source(self) -> DailyRecordSource:
        if self.settings.use_mock_source:
            return MockDailyRecordSource(seed=self.settings.mock_seed)
        return GarminDailyRecordSource(
            self.settings.garmin_token_dir,
            retries=self.settings.fetch_retries,
            backoff_s=self.settings.fetch_backoff_s,
        )

    @cached_property
    def briefing_service(self) -> BriefingService:
        return BriefingService(self.record_source, self.record_store, self.settings)
