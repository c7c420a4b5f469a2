"""Process-local record store.

The volatile half of the persistence layer. One instance is owned by the
application container and handed to every in-memory repository; there is no
module-level instance. Contents are loaded on first access, either from a
JSON snapshot on disk or from the demo seed.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import List, Optional, Union

from ..attendance.model import AttendanceRecord, attendance_from_dict, attendance_to_dict
from ..members.model import Member, member_from_dict, member_to_dict
from ..notifications.model import Notification, notification_from_dict, notification_to_dict
from ..users.model import DirectoryUser, user_from_dict, user_to_dict
from .seed import build_seed_data

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1


class RecordStore:
    def __init__(self, *, snapshot_path: Union[str, Path, None] = None, seed: bool = False):
        self.lock = threading.RLock()
        self._snapshot_path = Path(snapshot_path) if snapshot_path else None
        self._seed = bool(seed)
        self._loaded = False
        self._members: List[Member] = []
        self._attendance: List[AttendanceRecord] = []
        self._notifications: List[Notification] = []
        self._users: List[DirectoryUser] = []

    # Collections are live lists; mutate them only while holding ``lock``.
    @property
    def members(self) -> List[Member]:
        self._ensure_loaded()
        return self._members

    @property
    def attendance(self) -> List[AttendanceRecord]:
        self._ensure_loaded()
        return self._attendance

    @property
    def notifications(self) -> List[Notification]:
        self._ensure_loaded()
        return self._notifications

    @property
    def users(self) -> List[DirectoryUser]:
        self._ensure_loaded()
        return self._users

    @property
    def snapshot_path(self) -> Optional[Path]:
        return self._snapshot_path

    def _ensure_loaded(self) -> None:
        if self._loaded:
            return
        with self.lock:
            if self._loaded:
                return
            if self._snapshot_path and self._snapshot_path.exists():
                self._load_snapshot(self._snapshot_path)
            elif self._seed:
                self._load_seed()
            self._loaded = True

    def _load_seed(self) -> None:
        seed = build_seed_data()
        self._members = list(seed.members)
        self._users = list(seed.users)
        self._attendance = []
        self._notifications = []
        logger.info("Record store seeded (members=%d, users=%d)", len(self._members), len(self._users))

    def _load_snapshot(self, path: Path) -> None:
        payload = json.loads(path.read_text(encoding="utf-8"))
        self._members = [member_from_dict(d) for d in payload.get("members", [])]
        self._attendance = [attendance_from_dict(d) for d in payload.get("attendance", [])]
        self._notifications = [notification_from_dict(d) for d in payload.get("notifications", [])]
        self._users = [user_from_dict(d) for d in payload.get("users", [])]
        logger.info("Record store loaded from %s", path)

    def snapshot(self, path: Union[str, Path, None] = None) -> Path:
        """Write the store to disk as JSON and return the file path."""

        target = Path(path) if path else self._snapshot_path
        if target is None:
            raise ValueError("No snapshot path configured")

        with self.lock:
            payload = {
                "version": SNAPSHOT_VERSION,
                "members": [member_to_dict(m) for m in self.members],
                "attendance": [attendance_to_dict(r) for r in self.attendance],
                "notifications": [notification_to_dict(n) for n in self.notifications],
                "users": [user_to_dict(u) for u in self.users],
            }

        target.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=".snapshot-", dir=str(target.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(payload, fh, ensure_ascii=False, indent=2)
            os.replace(tmp_name, target)
        except Exception:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        return target

    def reset(self) -> None:
        """Drop everything and reload on next access (snapshot, seed or empty)."""

        with self.lock:
            self._members = []
            self._attendance = []
            self._notifications = []
            self._users = []
            self._loaded = False
