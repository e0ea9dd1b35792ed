# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

import re
from datetime import datetime

import common.parsing as parsing


def test_interpret_as_bool():
    assert parsing.interpret_as_bool("True")
    assert parsing.interpret_as_bool("true")
    assert parsing.interpret_as_bool("yes")
    assert parsing.interpret_as_bool("y")
    assert parsing.interpret_as_bool("1")
    assert parsing.interpret_as_bool(1)
    assert parsing.interpret_as_bool(True)
    assert not parsing.interpret_as_bool("False")
    assert not parsing.interpret_as_bool("Truee")
    assert not parsing.interpret_as_bool("no")
    assert not parsing.interpret_as_bool("0")
    assert not parsing.interpret_as_bool(0)
    assert not parsing.interpret_as_bool(False)


def test_utc_now_iso_sortable():
    timestamp = parsing.utc_now_iso()
    assert re.match(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}T[0-9]{2}:[0-9]{2}:[0-9]{2}\.[0-9]{6}\+00:00$", timestamp)
    assert datetime.fromisoformat(timestamp).utcoffset().total_seconds() == 0


def test_utc_today_iso():
    assert re.match(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$", parsing.utc_today_iso())
