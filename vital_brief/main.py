from __future__ import annotations

import asyncio
from pathlib import Path

from loguru import logger

from vital_brief.config import VitalBriefSettings
from vital_brief.service.insight_analysis.reporting.markdown_report import format_markdown
from vital_brief.service_factory import ServiceFactory


def setup_logger(out_dir: Path) -> None:
    log_dir = out_dir / "log"
    log_dir.mkdir(parents=True, exist_ok=True)

    logger.add(log_dir / "debug.log", rotation="100 MB", retention="7 days", level="DEBUG")
    logger.add(log_dir / "error.log", rotation="100 MB", retention="7 days", level="ERROR")
    logger.info("logger initialised")


async def run_once(service_factory: ServiceFactory) -> str | None:
    """Refresh the record history and render today's brief."""
    service = service_factory.briefing_service
    await service.refresh()
    brief = await service.today_brief()
    if brief is None:
        return None
    return format_markdown(brief)


def main() -> None:  # pragma: no cover
    settings = VitalBriefSettings()
    settings.out_dir.mkdir(parents=True, exist_ok=True)
    setup_logger(settings.out_dir)

    service_factory = ServiceFactory(settings)
    try:
        report = asyncio.run(run_once(service_factory))
    finally:
        service_factory.record_store.close()

    if report is None:
        logger.warning("No data available for a brief")
        return
    print(report)


if __name__ == "__main__":
    main()
