"""Supabase Storage backend for meal photos."""

from dataclasses import dataclass

from supabase import Client

from healthy_meal_track.services.meals import PhotoStorage


@dataclass
class SupabasePhotoStorage(PhotoStorage):
    """Stores meal photos in a Supabase Storage bucket."""

    client: Client
    bucket: str

    def upload(self, path: str, data: bytes, content_type: str) -> str:
        """Upload the photo and return its public URL."""
        storage = self.client.storage.from_(self.bucket)
        storage.upload(
            path=path,
            file=data,
            file_options={"content-type": content_type, "upsert": "false"},
        )
        return storage.get_public_url(path)

    def remove(self, path: str) -> None:
        """Delete the photo from the bucket."""
        self.client.storage.from_(self.bucket).remove([path])
