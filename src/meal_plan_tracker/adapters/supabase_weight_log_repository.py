"""Supabase repository for weight logs."""

import asyncio
from dataclasses import dataclass
from datetime import date
from uuid import UUID

from supabase import Client

from meal_plan_tracker.domain.progress import WeightLogEntry
from meal_plan_tracker.services.progress import WeightLogRepository


@dataclass
class SupabaseWeightLogRepository(WeightLogRepository):
    """Supabase implementation for the ``weight_logs`` table."""

    client: Client

    async def list_weight_logs(self, user_id: UUID) -> list[WeightLogEntry]:
        """Return weight logs for a user, oldest first."""
        return await asyncio.to_thread(self._list_weight_logs, user_id)

    async def upsert_weight_log(self, user_id: UUID, entry: WeightLogEntry) -> None:
        """Insert or replace the log for the entry's date."""
        await asyncio.to_thread(self._upsert_weight_log, user_id, entry)

    def _list_weight_logs(self, user_id: UUID) -> list[WeightLogEntry]:
        response = (
            self.client.table("weight_logs")
            .select("log_date, weight, bmi, notes")
            .eq("user_id", str(user_id))
            .order("log_date", desc=False)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def _upsert_weight_log(self, user_id: UUID, entry: WeightLogEntry) -> None:
        self.client.table("weight_logs").upsert(
            {
                "user_id": str(user_id),
                "log_date": entry.day.isoformat(),
                "weight": entry.weight_kg,
                "bmi": round(entry.bmi, 2) if entry.bmi is not None else None,
                "notes": entry.notes,
            },
            on_conflict="user_id,log_date",
        ).execute()


def _parse_row(row: dict[str, object]) -> WeightLogEntry:
    raw_day = str(row.get("log_date", ""))
    bmi = row.get("bmi")
    return WeightLogEntry(
        day=date.fromisoformat(raw_day[:10]),
        weight_kg=float(row.get("weight", 0.0)),
        bmi=float(bmi) if bmi is not None else None,
        notes=row.get("notes"),
    )
