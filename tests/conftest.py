from __future__ import annotations

import os
import tempfile

# Settings are read at import time, so the environment must be ready first.
os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-role-key")
os.environ.setdefault("TEMP_UPLOAD_DIR", tempfile.mkdtemp(prefix="playtube-uploads-"))
os.environ.setdefault("PLAYTUBE_STORAGE_PATH", os.path.join(tempfile.mkdtemp(prefix="playtube-client-"), "storage.json"))
