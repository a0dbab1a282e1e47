"""Top-level package for the peekview file browser.

peekview pairs a lightweight file browser with an automatically updated
preview panel for the entry under the cursor.
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"
