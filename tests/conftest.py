"""Root conftest — sets env vars BEFORE any tofuboi module is imported.

The config.py module-level singleton requires TELEGRAM_BOT_TOKEN at import
time, so it must be set before pytest discovers any test that transitively
imports tofuboi.config.
"""

import os
import tempfile

# Force-set (not setdefault) to prevent real env vars from leaking into tests
os.environ["TELEGRAM_BOT_TOKEN"] = "test:0000000000:AAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAA"
os.environ["ALLOWED_USERS"] = "12345"
os.environ["TOFUBOI_DIR"] = tempfile.mkdtemp(prefix="tofuboi-test-")
for _var in ("TOFUBOI_MESSAGE_BUDGET", "TOFUBOI_DEFAULT_LANG", "TOFUBOI_FALLBACK_LANGS"):
    os.environ.pop(_var, None)
