# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Exceptions raised while building the schema graph."""


class SchemaException(Exception):
    """Raised when a document refers to schema data that was never registered."""
