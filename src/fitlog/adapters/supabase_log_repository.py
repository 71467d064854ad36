"""Supabase repository for daily logs."""

from dataclasses import dataclass

from supabase import Client

from fitlog.domain.logs import DailyLog
from fitlog.services.meals import LogRepository, daily_log_from_dict, daily_log_to_dict


@dataclass
class SupabaseLogRepository(LogRepository):
    """Supabase implementation for daily logs, one row per (user, date)."""

    client: Client

    def list_logs(self, username: str) -> list[DailyLog]:
        """Return every log of a user ordered by date."""
        response = (
            self.client.table("daily_logs")
            .select("date, log")
            .eq("username", username)
            .order("date")
            .execute()
        )
        return [_row_to_log(row) for row in response.data or []]

    def get_log(self, username: str, date: str) -> DailyLog | None:
        """Return the log for a date, if present."""
        response = (
            self.client.table("daily_logs")
            .select("date, log")
            .eq("username", username)
            .eq("date", date)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _row_to_log(response.data[0])

    def save_log(self, username: str, log: DailyLog) -> None:
        """Insert or overwrite the log for its date."""
        self.client.table("daily_logs").upsert(
            _log_to_row(username, log), on_conflict="username,date"
        ).execute()

    def delete_log(self, username: str, date: str) -> None:
        """Delete the log for a date."""
        self.client.table("daily_logs").delete().eq("username", username).eq(
            "date", date
        ).execute()

    def replace_logs(self, username: str, logs: list[DailyLog]) -> None:
        """Delete every log of a user, then insert the given logs."""
        self.client.table("daily_logs").delete().eq("username", username).execute()
        rows = [_log_to_row(username, log) for log in logs]
        if rows:
            self.client.table("daily_logs").insert(rows).execute()


def _log_to_row(username: str, log: DailyLog) -> dict[str, object]:
    return {"username": username, "date": log.date, "log": daily_log_to_dict(log)}


def _row_to_log(row: dict[str, object]) -> DailyLog:
    payload = dict(row.get("log") or {})
    payload["date"] = row["date"]
    return daily_log_from_dict(payload)
