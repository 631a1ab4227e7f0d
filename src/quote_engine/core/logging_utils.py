# QuoteEngine - Commercial Insurance Quote Engine
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Process-wide logging setup.

Modules log through ``logging.getLogger(__name__)``; ``configure_logging``
is called once by the bootstrap to attach the root handler.
"""

from __future__ import annotations

import logging
from typing import Final

from beartype import beartype

__all__: Final = ["configure_logging"]

_DEFAULT_LOG_FORMAT: Final = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_is_configured: bool = False


@beartype
def configure_logging(
    *, level: int | str = logging.INFO, fmt: str = _DEFAULT_LOG_FORMAT
) -> None:
    """Configure the root logger on the first call; later calls do nothing."""
    global _is_configured
    if _is_configured:
        return

    logging.basicConfig(level=level, format=fmt)
    _is_configured = True
