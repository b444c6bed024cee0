import logging
from typing import Optional

from supabase import create_client, Client

from apps.cashback.utils.settings import settings

log = logging.getLogger("cashback.db")


def get_supabase() -> Optional[Client]:
    if not (settings.SUPABASE_URL and settings.SUPABASE_SERVICE_ROLE_KEY):
        return None
    try:
        return create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)
    except Exception as e:
        log.error("Supabase client creation failed: %s", e)
        return None
