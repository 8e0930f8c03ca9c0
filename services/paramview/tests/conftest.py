"""测试公共配置：日志目录指向临时目录，避免在仓库内落盘。"""

from __future__ import annotations

import os
import tempfile

os.environ.setdefault("PARAMVIEW_LOG_DIR", tempfile.mkdtemp(prefix="paramview-logs-"))
