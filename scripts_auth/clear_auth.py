"""
🗑️  Clear Cached Login
Deletes the shared session snapshot so the next run logs in again.

Usage:
    python scripts_auth/clear_auth.py            # refuses while a login is running
    python scripts_auth/clear_auth.py --force    # also removes a lock left by a hung process
"""

import os
import sys
from pathlib import Path

from filelock import FileLock, Timeout

sys.path.insert(0, str(Path(__file__).parent.parent))

from services.auth_errors import AuthStateError
from services.auth_state_service import invalidate
from services.settings_service import SuiteSettings


def clear(settings, force=False):
    """Invalidates the cached login. Returns the process exit code."""
    path = settings.auth_state_path
    lock_path = path + ".lock"

    lock = None
    if os.path.exists(lock_path):
        lock = FileLock(lock_path)
        try:
            lock.acquire(timeout=0)
        except Timeout:
            lock = None
            if not force:
                print(f"❌ A login is in progress (lock held: {lock_path})")
                print("   Wait for it to finish, or rerun with --force if that process is hung.")
                return 1
            print(f"⚠️  Lock held by another process, forcing removal: {lock_path}")

    try:
        deleted = invalidate(path)
        if force and lock is None and os.path.exists(lock_path):
            os.remove(lock_path)
            print(f"🔓 Lock file removed: {lock_path}")
    except (AuthStateError, OSError) as e:
        print(f"\n❌ Error: {e}")
        return 1
    finally:
        if lock is not None:
            lock.release()

    if deleted:
        print(f"✅ Snapshot removed: {path}")
    else:
        print(f"ℹ️  No snapshot at {path}")
    return 0


def main():
    print("🔐 Admin portal UI suite - clear cached login\n")
    sys.exit(clear(SuiteSettings.from_env(), force="--force" in sys.argv[1:]))


if __name__ == "__main__":
    main()
