"""Process-wide Firebase Admin app."""

from __future__ import annotations

import json
import logging
import threading

from orgchat.core.config import Settings

logger = logging.getLogger(__name__)

_init_lock = threading.Lock()


def get_firebase_app(settings: Settings):
    """Return the default Firebase app, initializing it once per process.

    A service account JSON document from settings is preferred; otherwise the
    ambient Google application default credentials are used.
    """
    import firebase_admin
    from firebase_admin import credentials

    with _init_lock:
        if firebase_admin._apps:
            return firebase_admin.get_app()

        options = {"projectId": settings.firebase_project_id} if settings.firebase_project_id else None
        if settings.firebase_service_account_json:
            try:
                certificate = credentials.Certificate(json.loads(settings.firebase_service_account_json))
            except (ValueError, TypeError) as exc:
                logger.error("firebase.init_failed reason=invalid_service_account")
                raise RuntimeError("Invalid Firebase service account configuration") from exc
            app = firebase_admin.initialize_app(certificate, options)
        else:
            app = firebase_admin.initialize_app(options=options)
        logger.info("firebase.initialized project_id=%s", settings.firebase_project_id or "default")
        return app
