# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Allow running the converter with 'python -m xsd_typegen'."""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
