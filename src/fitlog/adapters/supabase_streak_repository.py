"""Supabase repository for best streaks."""

from dataclasses import dataclass

from supabase import Client

from fitlog.services.analytics import StreakRepository


@dataclass
class SupabaseStreakRepository(StreakRepository):
    """Supabase implementation for best-ever streak counters."""

    client: Client

    def get_best_streak(self, username: str, kind: str) -> int:
        """Return the stored best streak, 0 when none."""
        response = (
            self.client.table("best_streaks")
            .select("value")
            .eq("username", username)
            .eq("kind", kind)
            .limit(1)
            .execute()
        )
        if not response.data:
            return 0
        return int(response.data[0].get("value") or 0)

    def set_best_streak(self, username: str, kind: str, value: int) -> None:
        """Store the best streak for a kind."""
        self.client.table("best_streaks").upsert(
            {"username": username, "kind": kind, "value": value},
            on_conflict="username,kind",
        ).execute()
