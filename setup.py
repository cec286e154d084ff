#!/usr/bin/python3
# Setup file for loosegit
# Copyright (C) 2008-2022 Jelmer Vernooĳ <jelmer@jelmer.uk>
# Copyright (C) 2026 The loosegit contributors
# SPDX-License-Identifier: Apache-2.0 OR GPL-2.0-or-later

from setuptools import setup

setup(
    package_data={"": ["py.typed"]},
)
