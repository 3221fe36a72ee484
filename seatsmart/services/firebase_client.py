"""
Firebase initialization and helpers
"""

from __future__ import annotations

import base64
import json
import os
from functools import lru_cache
from typing import Any

import firebase_admin
from firebase_admin import credentials, firestore

from seatsmart.core.config import settings

PLANS_COLLECTION = "seating_plans"


def _load_credentials_info() -> dict[str, Any] | None:
    """Read the service account from JSON, base64 JSON, or a file path, in that order."""
    if settings.FIREBASE_CREDENTIALS_JSON:
        return json.loads(settings.FIREBASE_CREDENTIALS_JSON)
    if settings.FIREBASE_CREDENTIALS_B64:
        decoded = base64.b64decode(settings.FIREBASE_CREDENTIALS_B64).decode("utf-8")
        return json.loads(decoded)
    if settings.FIREBASE_CREDENTIALS_FILE and os.path.exists(settings.FIREBASE_CREDENTIALS_FILE):
        with open(settings.FIREBASE_CREDENTIALS_FILE, "r", encoding="utf-8") as f:
            return json.load(f)
    return None


@lru_cache(maxsize=1)
def get_firestore_client():
    """Return a cached Firestore client, or None when Firebase is disabled."""
    if not settings.USE_FIREBASE:
        return None

    if not firebase_admin._apps:
        info = _load_credentials_info()
        if not info:
            raise RuntimeError(
                "Firebase credentials not provided. Set FIREBASE_CREDENTIALS_FILE, "
                "FIREBASE_CREDENTIALS_JSON, or FIREBASE_CREDENTIALS_B64"
            )
        firebase_admin.initialize_app(credentials.Certificate(info))

    return firestore.client()


def get_plan_document(plan_id: str):
    """Document reference for ``seating_plans/{plan_id}``."""
    fs = get_firestore_client()
    if fs is None:
        raise RuntimeError("Firestore is not enabled (USE_FIREBASE is false)")
    return fs.collection(PLANS_COLLECTION).document(plan_id)
