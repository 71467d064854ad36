"""Supabase repository for workout buckets."""

from dataclasses import dataclass

from supabase import Client

from fitlog.domain.workouts import WorkoutEntry
from fitlog.services.codec import workout_from_dict, workout_to_dict
from fitlog.services.workouts import WorkoutRepository


@dataclass
class SupabaseWorkoutRepository(WorkoutRepository):
    """Supabase implementation storing one row of entries per (user, date)."""

    client: Client

    def list_workouts(self, username: str) -> dict[str, list[WorkoutEntry]]:
        """Return every bucket of a user keyed by date."""
        response = (
            self.client.table("workouts")
            .select("date, entries")
            .eq("username", username)
            .order("date")
            .execute()
        )
        buckets: dict[str, list[WorkoutEntry]] = {}
        for row in response.data or []:
            entries = _row_to_entries(row)
            if entries:
                buckets[row["date"]] = entries
        return buckets

    def get_bucket(self, username: str, date: str) -> list[WorkoutEntry]:
        """Return the entries for a date."""
        response = (
            self.client.table("workouts")
            .select("date, entries")
            .eq("username", username)
            .eq("date", date)
            .limit(1)
            .execute()
        )
        if not response.data:
            return []
        return _row_to_entries(response.data[0])

    def save_bucket(
        self, username: str, date: str, entries: list[WorkoutEntry]
    ) -> None:
        """Upsert a bucket; an empty bucket removes the row."""
        if not entries:
            self.client.table("workouts").delete().eq("username", username).eq(
                "date", date
            ).execute()
            return
        self.client.table("workouts").upsert(
            _bucket_to_row(username, date, entries), on_conflict="username,date"
        ).execute()

    def replace_workouts(
        self, username: str, workouts: dict[str, list[WorkoutEntry]]
    ) -> None:
        """Delete every bucket of a user, then insert the given buckets."""
        self.client.table("workouts").delete().eq("username", username).execute()
        rows = [
            _bucket_to_row(username, date, entries)
            for date, entries in workouts.items()
            if entries
        ]
        if rows:
            self.client.table("workouts").insert(rows).execute()


def _bucket_to_row(
    username: str, date: str, entries: list[WorkoutEntry]
) -> dict[str, object]:
    return {
        "username": username,
        "date": date,
        "entries": [workout_to_dict(entry) for entry in entries],
    }


def _row_to_entries(row: dict[str, object]) -> list[WorkoutEntry]:
    return [workout_from_dict(raw, row["date"]) for raw in row.get("entries") or []]
