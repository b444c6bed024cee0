"""
Business Directory (Supabase Adapter)
=====================================

Purpose:
- Read-only view over the hosted `subscribers` table.
- Only rows with status = 'active' are ever returned.
- The relay never creates, updates or deactivates businesses.

Expected columns on public.subscribers:
   - id uuid primary key
   - business_name text
   - owner_name text
   - email text
   - status text ('active' | ...)
   - business_category text
   - parish text null
   - neighborhood text null
   - plan_type text null
   - created_at timestamptz
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from postgrest.exceptions import APIError

from apps.cashback.services.errors import DirectoryUnavailable

log = logging.getLogger("cashback.directory")

DEFAULT_PARISH = "Orleans Parish"

LIST_COLUMNS = "id, business_name, owner_name, email, status, business_category, parish, neighborhood"

# Postgres "invalid input syntax" (e.g. a non-uuid id): the row cannot exist.
_INVALID_TEXT_REPRESENTATION = "22P02"


def format_location(neighborhood: Optional[str], parish: Optional[str]) -> str:
    return f"{neighborhood or ''}, {parish or DEFAULT_PARISH}".strip()


@dataclass(frozen=True)
class Business:
    id: str
    name: Optional[str]
    email: Optional[str]
    category: Optional[str]
    location: str
    owner: Optional[str] = None
    plan_type: Optional[str] = None
    join_date: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Business":
        return cls(
            id=str(row.get("id")),
            name=row.get("business_name"),
            email=row.get("email"),
            category=row.get("business_category"),
            location=format_location(row.get("neighborhood"), row.get("parish")),
            owner=row.get("owner_name"),
            plan_type=row.get("plan_type"),
            join_date=row.get("created_at"),
        )

    def to_summary(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "category": self.category,
            "location": self.location,
        }

    def to_dict(self) -> Dict[str, Any]:
        out = self.to_summary()
        out.update(
            {
                "owner": self.owner,
                "planType": self.plan_type,
                "joinDate": self.join_date,
            }
        )
        return out


class BusinessDirectory:
    def __init__(self, supabase_client: Any, *, table: str = "subscribers") -> None:
        self.sb = supabase_client
        self.table = table

    def _client(self) -> Any:
        if self.sb is None:
            raise DirectoryUnavailable("Supabase not configured: set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY.")
        return self.sb

    # -----------------------------
    # Queries
    # -----------------------------
    def list_active(self) -> List[Business]:
        sb = self._client()
        try:
            r = sb.table(self.table).select(LIST_COLUMNS).eq("status", "active").execute()
        except Exception as ex:
            raise DirectoryUnavailable(f"Failed to list active businesses: {ex}") from ex
        rows = getattr(r, "data", None) or []
        return [Business.from_row(x) for x in rows if isinstance(x, dict)]

    def count_active(self) -> int:
        sb = self._client()
        try:
            r = sb.table(self.table).select("id").eq("status", "active").execute()
        except Exception as ex:
            raise DirectoryUnavailable(f"Failed to count active businesses: {ex}") from ex
        return len(getattr(r, "data", None) or [])

    def get_active(self, business_id: str) -> Optional[Business]:
        """
        Returns the business when it exists and is active, else None.
        Store outages raise DirectoryUnavailable.
        """
        if not business_id:
            return None
        sb = self._client()
        try:
            r = (
                sb.table(self.table)
                .select("*")
                .eq("id", business_id)
                .eq("status", "active")
                .limit(1)
                .execute()
            )
        except APIError as ex:
            if getattr(ex, "code", None) == _INVALID_TEXT_REPRESENTATION:
                log.info("Rejected malformed business id=%s", business_id)
                return None
            raise DirectoryUnavailable(f"Failed to fetch business {business_id}: {ex}") from ex
        except Exception as ex:
            raise DirectoryUnavailable(f"Failed to fetch business {business_id}: {ex}") from ex

        rows = getattr(r, "data", None) or []
        if not rows or not isinstance(rows[0], dict):
            return None
        return Business.from_row(rows[0])
