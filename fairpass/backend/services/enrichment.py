"""
Enrichment Service.

Runs AI enrichment over stored registrants: one at a time on demand, a
chosen set in bulk, or a backfill over everything not yet enriched.
"""

import asyncio

from sqlalchemy.ext.asyncio import AsyncSession

from fairpass.backend.core.config import get_app_config
from fairpass.backend.integrations import ai
from fairpass.backend.models.registration import Registrant
from fairpass.backend.repositories.registration import RegistrantRepository
from fairpass.backend.schemas.integrations import BackfillResult, EnrichBulkResult, EnrichmentResponse
from fairpass.backend.services.base import BaseService

DEFAULT_MAJOR = "Undecided"
DEFAULT_CATEGORY = "Uncategorized"
DEFAULT_GENDER = "Unknown"


class EnrichmentService(BaseService):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.registrants = RegistrantRepository(session)

    async def _apply(self, registrant: Registrant) -> EnrichmentResponse:
        """
        Enrich one registrant and store the result.

        Missing values are stored as defaults so the registrant never
        qualifies for backfill again.
        """
        enrichment = await ai.enrich_registrant(registrant.full_name, registrant.interested_major)
        values = {
            "standardized_major": enrichment.standardized_major or DEFAULT_MAJOR,
            "major_category": enrichment.major_category or DEFAULT_CATEGORY,
            "gender": enrichment.gender or DEFAULT_GENDER,
        }
        await self.registrants.apply(registrant, **values)
        return EnrichmentResponse(**values)

    async def enrich_registrant(self, registrant_id: str) -> EnrichmentResponse:
        registrant = await self.registrants.get_by_id(registrant_id)
        result = await self._apply(registrant)
        self._log_operation("Registrant enriched", registrant_id=registrant_id)
        return result

    async def enrich_bulk(self, registrant_ids: list[str]) -> EnrichBulkResult:
        result = EnrichBulkResult()
        for registrant in await self.registrants.list_by_ids(registrant_ids):
            try:
                async with self.session.begin_nested():
                    await self._apply(registrant)
                result.success += 1
            except Exception as e:
                self._logger.error(
                    "Bulk enrichment failed for registrant",
                    extra={"registrant_id": registrant.id, "error": str(e)},
                )
                result.failed += 1
                result.errors.append(f"{registrant.id}: {e}")

        self._log_operation("Bulk enrichment done", success=result.success, failed=result.failed)
        return result

    async def backfill(
        self,
        batch_size: int | None = None,
        delay_seconds: float | None = None,
        max_batches: int | None = None,
    ) -> BackfillResult:
        """
        Enrich registrants missing gender or standardized major, batch by batch.

        Stops on an empty batch or after max_batches.
        """
        config = get_app_config().integrations.enrichment
        batch_size = batch_size or config.batch_size
        delay_seconds = config.delay_seconds if delay_seconds is None else delay_seconds

        processed = 0
        batches = 0
        while max_batches is None or batches < max_batches:
            batch = await self.registrants.list_unenriched(batch_size)
            if not batch:
                break

            batches += 1
            for registrant in batch:
                await self._apply(registrant)
                processed += 1
                if delay_seconds:
                    await asyncio.sleep(delay_seconds)

            await self.session.flush()
            self._log_debug("Backfill batch done", batch=batches, size=len(batch))

        self._log_operation("Enrichment backfill finished", processed=processed, batches=batches)
        return BackfillResult(processed=processed, batches=batches)
