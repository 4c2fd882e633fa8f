"""chainaudit: Static security analysis for smart contract source code."""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"
