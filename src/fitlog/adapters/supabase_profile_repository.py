"""Supabase-backed profile repository."""

from dataclasses import dataclass

from supabase import Client

from fitlog.domain.profiles import Profile
from fitlog.services.codec import profile_from_dict, profile_to_dict
from fitlog.services.profiles import ProfileRepository


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase implementation for profile persistence."""

    client: Client

    def get_profile(self, username: str) -> Profile | None:
        """Return the profile for a username, if present."""
        response = (
            self.client.table("profiles")
            .select("username, profile")
            .eq("username", username)
            .limit(1)
            .execute()
        )
        if response.data:
            row = response.data[0]
            return profile_from_dict(row["username"], row.get("profile"))
        return None

    def create_profile(self, profile: Profile) -> Profile:
        """Create a new profile row and return it."""
        response = (
            self.client.table("profiles")
            .insert(
                {"username": profile.username, "profile": profile_to_dict(profile)}
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create profile in Supabase")
        row = response.data[0]
        return profile_from_dict(row["username"], row.get("profile"))

    def save_profile(self, profile: Profile) -> None:
        """Overwrite the stored profile document."""
        self.client.table("profiles").update(
            {"profile": profile_to_dict(profile)}
        ).eq("username", profile.username).execute()
