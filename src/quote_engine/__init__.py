# QuoteEngine - Commercial Insurance Quote Engine
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Commercial insurance quote engine.

Quotes commercial premiums from a business profile, a coverage selection
and optional risk factors: eligibility, rate resolution, risk scoring and
an itemized premium breakdown.
"""

__version__ = "0.1.0"
