# test_config.py -- Tests for reading and writing configuration files
# Copyright (C) 2011 Jelmer Vernooij <jelmer@jelmer.uk>
# Copyright (C) 2026 The loosegit contributors
#
# SPDX-License-Identifier: Apache-2.0 OR GPL-2.0-or-later
# loosegit is dual-licensed under the Apache License, Version 2.0 and the GNU
# General Public License as published by the Free Software Foundation; version 2.0
# or (at your option) any later version. You can redistribute it and/or
# modify it under the terms of either of these two licenses.
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
# You should have received a copy of the licenses; if not, see
# <http://www.gnu.org/licenses/> for a copy of the GNU General Public License
# and <http://www.apache.org/licenses/LICENSE-2.0> for a copy of the Apache
# License, Version 2.0.
#

"""Tests for reading and writing configuration files."""

import os
import shutil
import tempfile
from io import BytesIO

from loosegit.config import (
    CaseInsensitiveOrderedDict,
    ConfigDict,
    ConfigFile,
    _check_section_name,
    _check_variable_name,
    _escape_value,
    _format_string,
    _parse_string,
)

from . import TestCase


class ConfigFileTests(TestCase):
    def from_file(self, text: bytes) -> ConfigFile:
        return ConfigFile.from_file(BytesIO(text))

    def test_empty(self) -> None:
        ConfigFile()

    def test_eq(self) -> None:
        self.assertEqual(ConfigFile(), ConfigFile())

    def test_default_config(self) -> None:
        cf = self.from_file(
            b"""[core]
\trepositoryformatversion = 0
\tfilemode = false
\tbare = false
"""
        )
        self.assertEqual(
            ConfigFile(
                {
                    (b"core",): {
                        b"repositoryformatversion": b"0",
                        b"filemode": b"false",
                        b"bare": b"false",
                    }
                }
            ),
            cf,
        )

    def test_from_file_empty(self) -> None:
        self.assertEqual(ConfigFile(), self.from_file(b""))

    def test_empty_line_before_section(self) -> None:
        cf = self.from_file(b"\n[section]\n")
        self.assertEqual(ConfigFile({(b"section",): {}}), cf)

    def test_comment_before_section(self) -> None:
        cf = self.from_file(b"# foo\n[section]\n")
        self.assertEqual(ConfigFile({(b"section",): {}}), cf)

    def test_comment_after_section(self) -> None:
        cf = self.from_file(b"[section] # foo\n")
        self.assertEqual(ConfigFile({(b"section",): {}}), cf)

    def test_comment_after_variable(self) -> None:
        cf = self.from_file(b"[section]\nbar= foo ; a comment\n")
        self.assertEqual(ConfigFile({(b"section",): {b"bar": b"foo"}}), cf)

    def test_comment_character_within_value_string(self) -> None:
        cf = self.from_file(b'[section]\nbar= "foo#bar"\n')
        self.assertEqual(ConfigFile({(b"section",): {b"bar": b"foo#bar"}}), cf)

    def test_comment_character_within_section_string(self) -> None:
        cf = self.from_file(b'[branch "foo#bar"] # a comment\nbar= foo\n')
        self.assertEqual(ConfigFile({(b"branch", b"foo#bar"): {b"bar": b"foo"}}), cf)

    def test_closing_bracket_within_section_string(self) -> None:
        cf = self.from_file(b'[branch "foo]bar"] # a comment\nbar= foo\n')
        self.assertEqual(ConfigFile({(b"branch", b"foo]bar"): {b"bar": b"foo"}}), cf)

    def test_from_file_section(self) -> None:
        cf = self.from_file(b"[core]\nfoo = bar\n")
        self.assertEqual(b"bar", cf.get((b"core",), b"foo"))
        self.assertEqual(b"bar", cf.get((b"core", b"foo"), b"foo"))

    def test_from_file_utf8_bom(self) -> None:
        text = "[core]\nfoo = b\u00e4r\n".encode("utf-8-sig")
        cf = self.from_file(text)
        self.assertEqual(b"b\xc3\xa4r", cf.get((b"core",), b"foo"))

    def test_from_file_section_case_insensitive(self) -> None:
        cf = self.from_file(b"[cOre]\nfOo = bar\n")
        self.assertEqual(b"bar", cf.get((b"core",), b"foo"))
        self.assertEqual(b"bar", cf.get((b"CORE",), b"FOO"))
        self.assertEqual([(b"cOre",)], list(cf.sections()))

    def test_from_file_with_mixed_quoted(self) -> None:
        cf = self.from_file(b'[core]\nfoo = "bar"la\n')
        self.assertEqual(b"barla", cf.get((b"core",), b"foo"))

    def test_from_file_with_escapes(self) -> None:
        cf = self.from_file(b'[core]\nfoo = "a\\tb\\n\\"c\\""\n')
        self.assertEqual(b'a\tb\n"c"', cf.get((b"core",), b"foo"))

    def test_from_file_with_boolean_setting(self) -> None:
        cf = self.from_file(b"[core]\nfoo\n")
        self.assertEqual(b"true", cf.get((b"core",), b"foo"))
        self.assertTrue(cf.get_boolean((b"core",), b"foo"))

    def test_from_file_subsection(self) -> None:
        cf = self.from_file(b'[branch "foo"]\nfoo = bar\n')
        self.assertEqual(b"bar", cf.get((b"branch", b"foo"), b"foo"))

    def test_from_file_subsection_dotted(self) -> None:
        cf = self.from_file(b"[branch.foo]\nfoo = bar\n")
        self.assertEqual(b"bar", cf.get((b"branch", b"foo"), b"foo"))

    def test_from_file_subsection_not_quoted(self) -> None:
        self.assertRaises(ValueError, self.from_file, b"[branch foo]\nfoo = bar\n")

    def test_from_file_invalid_variable_name(self) -> None:
        self.assertRaises(ValueError, self.from_file, b"[core]\n1foo = bar\n")
        self.assertRaises(ValueError, self.from_file, b"[core]\nfo_o = bar\n")

    def test_from_file_invalid_section_name(self) -> None:
        self.assertRaises(ValueError, self.from_file, b"[c_ore]\nfoo = bar\n")

    def test_from_file_missing_bracket(self) -> None:
        self.assertRaises(ValueError, self.from_file, b"[core\nfoo = bar\n")

    def test_from_file_setting_without_section(self) -> None:
        self.assertRaises(ValueError, self.from_file, b"foo = bar\n")

    def test_from_file_missing_end_quote(self) -> None:
        self.assertRaises(ValueError, self.from_file, b'[core]\nfoo = "bar\n')

    def test_from_file_bad_escape(self) -> None:
        self.assertRaises(ValueError, self.from_file, b"[core]\nfoo = \\x\n")

    def test_write_to_file_empty(self) -> None:
        c = ConfigFile()
        f = BytesIO()
        c.write_to_file(f)
        self.assertEqual(b"", f.getvalue())

    def test_write_to_file_section(self) -> None:
        c = ConfigFile()
        c.set((b"core",), b"foo", b"bar")
        f = BytesIO()
        c.write_to_file(f)
        self.assertEqual(b"[core]\n\tfoo = bar\n", f.getvalue())

    def test_write_to_file_subsection(self) -> None:
        c = ConfigFile()
        c.set((b"branch", b"blie"), b"foo", b"bar")
        f = BytesIO()
        c.write_to_file(f)
        self.assertEqual(b'[branch "blie"]\n\tfoo = bar\n', f.getvalue())

    def test_write_to_file_quotes_whitespace(self) -> None:
        c = ConfigFile()
        c.set((b"core",), b"foo", b" bar")
        f = BytesIO()
        c.write_to_file(f)
        self.assertEqual(b'[core]\n\tfoo = " bar"\n', f.getvalue())

    def test_write_then_read(self) -> None:
        c = ConfigFile()
        c.set((b"core",), b"foo", b"a;b\tc")
        c.set((b"remote", b"we\"ird"), b"url", b"x")
        f = BytesIO()
        c.write_to_file(f)
        f.seek(0)
        self.assertEqual(c, ConfigFile.from_file(f))

    def test_path_round_trip(self) -> None:
        tempdir = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, tempdir)
        path = os.path.join(tempdir, "config")
        c = ConfigFile()
        c.set("core", "bare", False)
        c.write_to_path(path)
        read = ConfigFile.from_path(path)
        self.assertEqual(path, read.path)
        self.assertEqual(b"false", read.get("core", "bare"))
        read.set("core", "bare", True)
        read.write_to_path()
        self.assertTrue(ConfigFile.from_path(path).get_boolean("core", "bare"))

    def test_write_to_path_without_path(self) -> None:
        self.assertRaises(ValueError, ConfigFile().write_to_path)


class ConfigDictTests(TestCase):
    def test_get_set(self) -> None:
        cd = ConfigDict()
        self.assertRaises(KeyError, cd.get, b"foo", b"core")
        cd.set((b"core",), b"foo", b"bla")
        self.assertEqual(b"bla", cd.get((b"core",), b"foo"))
        cd.set((b"core",), b"foo", b"bloe")
        self.assertEqual(b"bloe", cd.get((b"core",), b"foo"))

    def test_get_str(self) -> None:
        cd = ConfigDict()
        cd.set("core", "foo", "bla")
        self.assertEqual(b"bla", cd.get((b"core",), b"foo"))
        self.assertEqual(b"bla", cd.get("core", "foo"))

    def test_get_boolean(self) -> None:
        cd = ConfigDict()
        cd.set((b"core",), b"foo", b"true")
        self.assertTrue(cd.get_boolean((b"core",), b"foo"))
        cd.set((b"core",), b"foo", b"off")
        self.assertFalse(cd.get_boolean((b"core",), b"foo"))
        cd.set((b"core",), b"foo", b"invalid")
        self.assertRaises(ValueError, cd.get_boolean, (b"core",), b"foo")
        self.assertIsNone(cd.get_boolean((b"core",), b"missing"))
        self.assertTrue(cd.get_boolean((b"core",), b"missing", True))

    def test_set_boolean(self) -> None:
        cd = ConfigDict()
        cd.set("core", "filemode", True)
        self.assertEqual(b"true", cd.get("core", "filemode"))

    def test_get_int(self) -> None:
        cd = ConfigDict()
        cd.set("core", "level", "3")
        cd.set("core", "window", "2k")
        cd.set("core", "big", "1g")
        cd.set("core", "bad", "x")
        self.assertEqual(3, cd.get_int("core", "level"))
        self.assertEqual(2048, cd.get_int("core", "window"))
        self.assertEqual(1024**3, cd.get_int("core", "big"))
        self.assertEqual(7, cd.get_int("core", "missing", 7))
        self.assertRaises(ValueError, cd.get_int, "core", "bad")

    def test_items(self) -> None:
        cd = ConfigDict()
        cd.set((b"core",), b"foo", b"bla")
        cd.set((b"core",), b"bar", b"blo")
        self.assertEqual(
            [(b"foo", b"bla"), (b"bar", b"blo")], list(cd.items((b"core",)))
        )
        self.assertEqual([], list(cd.items((b"other",))))

    def test_sections(self) -> None:
        cd = ConfigDict()
        cd.set((b"core2",), b"foo", b"bloe")
        cd.set((b"core", b"sub"), b"foo", b"bla")
        self.assertEqual([(b"core2",), (b"core", b"sub")], list(cd.sections()))
        self.assertTrue(cd.has_section(b"CORE2"))
        self.assertTrue(cd.has_section((b"core", b"sub")))
        self.assertFalse(cd.has_section((b"core", b"SUB")))
        self.assertFalse(cd.has_section(b"missing"))

    def test_subsection_falls_back_to_section(self) -> None:
        cd = ConfigDict()
        cd.set((b"core",), b"foo", b"outer")
        self.assertEqual(b"outer", cd.get((b"core", b"sub"), b"foo"))
        cd.set((b"core", b"sub"), b"foo", b"inner")
        self.assertEqual(b"inner", cd.get((b"core", b"sub"), b"foo"))


class CaseInsensitiveOrderedDictTests(TestCase):
    def test_keeps_first_spelling(self) -> None:
        d: CaseInsensitiveOrderedDict[bytes, int] = CaseInsensitiveOrderedDict()
        d[b"Foo"] = 1
        d[b"FOO"] = 2
        self.assertEqual([b"Foo"], list(d))
        self.assertEqual(2, d[b"foo"])
        del d[b"fOO"]
        self.assertEqual(0, len(d))

    def test_subsection_case_sensitive(self) -> None:
        d: CaseInsensitiveOrderedDict[tuple[bytes, ...], int] = (
            CaseInsensitiveOrderedDict()
        )
        d[(b"Branch", b"Main")] = 1
        self.assertEqual(1, d[(b"branch", b"Main")])
        self.assertRaises(KeyError, d.__getitem__, (b"branch", b"main"))


class EscapeValueTests(TestCase):
    def test_nothing(self) -> None:
        self.assertEqual(b"foo", _escape_value(b"foo"))

    def test_backslash(self) -> None:
        self.assertEqual(b"foo\\\\", _escape_value(b"foo\\"))

    def test_newline(self) -> None:
        self.assertEqual(b"foo\\n", _escape_value(b"foo\n"))


class FormatStringTests(TestCase):
    def test_quoted(self) -> None:
        self.assertEqual(b'" foo"', _format_string(b" foo"))
        self.assertEqual(b'"\\tfoo"', _format_string(b"\tfoo"))
        self.assertEqual(b'"foo;bar"', _format_string(b"foo;bar"))

    def test_not_quoted(self) -> None:
        self.assertEqual(b"foo", _format_string(b"foo"))
        self.assertEqual(b"foo bar", _format_string(b"foo bar"))


class ParseStringTests(TestCase):
    def test_quoted(self) -> None:
        self.assertEqual(b" foo", _parse_string(b'" foo"'))
        self.assertEqual(b"\tfoo", _parse_string(b'"\\tfoo"'))

    def test_not_quoted(self) -> None:
        self.assertEqual(b"foo", _parse_string(b"foo"))
        self.assertEqual(b"foo bar", _parse_string(b"foo bar"))

    def test_nothing(self) -> None:
        self.assertEqual(b"", _parse_string(b""))

    def test_tab(self) -> None:
        self.assertEqual(b"\tbar\t", _parse_string(b"\\tbar\\t"))

    def test_newline(self) -> None:
        self.assertEqual(b"\nbar\t", _parse_string(b"\\nbar\\t\t"))

    def test_quote(self) -> None:
        self.assertEqual(b'"foo"', _parse_string(b'\\"foo\\"'))


class CheckVariableNameTests(TestCase):
    def test_invalid(self) -> None:
        self.assertFalse(_check_variable_name(b"foo "))
        self.assertFalse(_check_variable_name(b"bar,bar"))
        self.assertFalse(_check_variable_name(b"bar.bar"))
        self.assertFalse(_check_variable_name(b"1foo"))

    def test_valid(self) -> None:
        self.assertTrue(_check_variable_name(b"FOO"))
        self.assertTrue(_check_variable_name(b"foo"))
        self.assertTrue(_check_variable_name(b"foo-bar"))


class CheckSectionNameTests(TestCase):
    def test_invalid(self) -> None:
        self.assertFalse(_check_section_name(b"foo "))
        self.assertFalse(_check_section_name(b"bar,bar"))

    def test_valid(self) -> None:
        self.assertTrue(_check_section_name(b"FOO"))
        self.assertTrue(_check_section_name(b"foo"))
        self.assertTrue(_check_section_name(b"foo-bar"))
        self.assertTrue(_check_section_name(b"bar.bar"))
