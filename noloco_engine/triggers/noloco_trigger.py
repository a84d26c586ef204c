import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from noloco_engine.core.config import get_settings
from noloco_engine.core.context import extract_locator_value, split_include
from noloco_engine.sdks.noloco_sdk.client import NolocoClient
from noloco_engine.sdks.noloco_sdk.models import RecordsQueryParams

logger = logging.getLogger(__name__)

RECORD_CREATED = "recordCreated"
RECORD_UPDATED = "recordUpdated"
TRIGGER_EVENTS = (RECORD_CREATED, RECORD_UPDATED)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass
class PollResult:
    """Records to emit and the checkpoint the host should persist."""

    records: List[Dict[str, Any]] = field(default_factory=list)
    checkpoint: Optional[str] = None

    @property
    def has_records(self) -> bool:
        return bool(self.records)


class NolocoTrigger:
    """Polling trigger for new or updated records of a Noloco table"""

    def __init__(self, workflow_id: str, trigger_config: Dict[str, Any], client: NolocoClient):
        self.workflow_id = str(workflow_id)
        self.config = trigger_config
        self.enabled = trigger_config.get("enabled", True)
        self.client = client
        self.settings = get_settings()

        self.project = extract_locator_value(trigger_config.get("app"))
        self.table = extract_locator_value(trigger_config.get("dataType"))
        self.event = trigger_config.get("event", RECORD_CREATED)
        self.include = split_include((trigger_config.get("options") or {}).get("include"))

        if not self.project or not self.table:
            raise ValueError("Noloco trigger needs both an app and a table")
        if self.event not in TRIGGER_EVENTS:
            raise ValueError(f"Unknown Noloco trigger event '{self.event}'")

    @property
    def trigger_type(self) -> str:
        return "NOLOCO"

    @property
    def sort_field(self) -> str:
        return "updatedAt" if self.event == RECORD_UPDATED else "createdAt"

    def record_timestamp(self, record: Dict[str, Any]) -> Optional[str]:
        """Timestamp the event compares on; updates fall back to the creation time."""
        if self.event == RECORD_UPDATED:
            return record.get("updatedAt") or record.get("createdAt")
        return record.get("createdAt")

    def _is_newer(self, record: Dict[str, Any], last_seen: datetime) -> bool:
        stamp = parse_timestamp(self.record_timestamp(record))
        return stamp is not None and stamp > last_seen

    async def poll(self, checkpoint: Optional[str], manual: bool = False) -> PollResult:
        """
        Fetch records that arrived since ``checkpoint``.

        The newest page is fetched in descending order of the event's timestamp.
        With a checkpoint, only records strictly newer than it are returned.
        Without one, a manual run returns a small sample and a scheduled run
        returns nothing, only establishing the baseline.

        Args:
            checkpoint: Timestamp persisted by the host after the previous poll
            manual: Whether a user started this poll by hand

        Returns:
            PollResult with the new records and the checkpoint to persist
        """
        if not self.enabled:
            logger.info(f"Noloco trigger for workflow {self.workflow_id} is disabled")
            return PollResult(checkpoint=checkpoint)

        page = await self.client.list_records(
            self.project,
            self.table,
            RecordsQueryParams(
                sort_by=self.sort_field,
                order_by="DESC",
                first=self.settings.noloco_page_size_cap,
                include=self.include,
            ),
        )
        if not page.records:
            return PollResult(checkpoint=checkpoint)

        if checkpoint:
            last_seen = parse_timestamp(checkpoint)
            if last_seen is None:
                logger.warning(
                    f"Unreadable checkpoint {checkpoint!r} for workflow {self.workflow_id}, "
                    f"emitting nothing and resetting it"
                )
                new_records = []
            else:
                new_records = [
                    record for record in page.records if self._is_newer(record, last_seen)
                ]
        elif manual:
            new_records = page.records[: self.settings.noloco_manual_sample_size]
        else:
            new_records = []

        newest = self.record_timestamp(page.records[0])
        next_checkpoint = str(newest) if newest else checkpoint

        logger.info(
            f"Noloco {self.event} poll for workflow {self.workflow_id}: "
            f"{len(new_records)} new of {len(page.records)} fetched"
        )
        return PollResult(records=new_records, checkpoint=next_checkpoint)
