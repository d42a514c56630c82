# Copyright 2026 scopelex Contributors
# SPDX-License-Identifier: Apache-2.0

"""Sphinx configuration for the scopelex documentation."""

project = "scopelex"
author = "scopelex Contributors"
release = "0.1.0"

extensions: list[str] = ["sphinx.ext.autodoc", "sphinx.ext.napoleon"]

html_theme = "alabaster"
