import logging
import unittest

from xliffkit.exceptions import UnsupportedVersionError, XliffParseError
from xliffkit.model import TranslationState, XliffVersion
from xliffkit.parser import parse

XLIFF_12_SOURCE = """<?xml version="1.0" encoding="UTF-8"?>
<xliff version="1.2" xmlns="urn:oasis:names:tc:xliff:document:1.2">
    <file source-language="en" datatype="plaintext" original="test.xlf" date="2020-10-18T18:20:51Z" product-name="my_ext">
        <header/>
        <body>
            <trans-unit id="headerComment">
                <source>The default Header Comment.</source>
            </trans-unit>
            <trans-unit id="generator">
                <source>The "Generator" Meta Tag.</source>
            </trans-unit>
        </body>
    </file>
</xliff>"""

XLIFF_12_TARGET = """<?xml version="1.0" encoding="UTF-8"?>
<xliff version="1.2" xmlns="urn:oasis:names:tc:xliff:document:1.2">
    <file source-language="en" target-language="de" datatype="plaintext" original="test.xlf" date="2020-10-18T18:20:51Z" product-name="my_ext">
        <header/>
        <body>
            <trans-unit id="headerComment" approved="yes">
                <source>The default Header Comment.</source>
                <target>Der Standard-Header-Kommentar.</target>
            </trans-unit>
            <trans-unit id="generator" approved="yes">
                <source>The "Generator" Meta Tag.</source>
                <target>Der "Generator"-Meta-Tag.</target>
                <note>Shown in the page head</note>
            </trans-unit>
            <trans-unit id="draft" approved="no">
                <source>Draft</source>
                <target/>
            </trans-unit>
        </body>
    </file>
</xliff>"""

XLIFF_20_SOURCE = """<?xml version="1.0" encoding="UTF-8" ?>
<xliff version="2.0" xmlns="urn:oasis:names:tc:xliff:document:2.0" srcLang="en">
    <file id="f1">
        <unit id="headerComment">
            <segment>
                <source>The default Header Comment.</source>
            </segment>
        </unit>
        <unit id="generator">
            <segment>
                <source>The "Generator" Meta Tag.</source>
            </segment>
        </unit>
    </file>
</xliff>"""

XLIFF_20_TARGET = """<?xml version="1.0" encoding="UTF-8"?>
<xliff version="2.0" xmlns="urn:oasis:names:tc:xliff:document:2.0" srcLang="en" trgLang="de">
    <file id="f1">
        <unit id="headerComment">
            <segment state="final">
                <source>The default Header Comment.</source>
                <target>Der Standard-Header-Kommentar.</target>
            </segment>
        </unit>
        <unit id="generator">
            <notes>
                <note>Shown in the page head</note>
            </notes>
            <segment state="reviewed">
                <source>The "Generator" Meta Tag.</source>
                <target>Der "Generator"-Meta-Tag.</target>
            </segment>
        </unit>
    </file>
    <file id="f2">
        <unit id="footer">
            <segment state="translated">
                <source>Footer</source>
                <target>Fußzeile</target>
            </segment>
        </unit>
    </file>
</xliff>"""


class TestParseXliff12(unittest.TestCase):
    def test_source_only(self):
        doc = parse(XLIFF_12_SOURCE)

        self.assertEqual(doc.version, XliffVersion.V1_2)
        self.assertEqual(doc.version, "1.2")
        self.assertEqual(len(doc.files), 1)

        f = doc.files[0]
        self.assertEqual(f.id, "test.xlf")
        self.assertEqual(f.source_language, "en")
        self.assertIsNone(f.target_language)
        self.assertEqual(f.datatype, "plaintext")
        self.assertEqual(f.original, "test.xlf")
        self.assertEqual(f.date, "2020-10-18T18:20:51Z")
        self.assertEqual(f.product_name, "my_ext")
        self.assertEqual(len(f.units), 2)

        u1, u2 = f.units
        self.assertEqual(u1.id, "headerComment")
        self.assertEqual(u1.source, "The default Header Comment.")
        self.assertIsNone(u1.target)
        self.assertIsNone(u1.note)
        self.assertEqual(u1.state, TranslationState.INITIAL)
        self.assertEqual(u2.id, "generator")
        self.assertEqual(u2.source, 'The "Generator" Meta Tag.')

    def test_with_targets(self):
        doc = parse(XLIFF_12_TARGET)
        f = doc.files[0]
        self.assertEqual(f.target_language, "de")

        u1, u2, u3 = f.units
        self.assertEqual(u1.target, "Der Standard-Header-Kommentar.")
        self.assertEqual(u1.state, "final")
        self.assertEqual(u2.source, 'The "Generator" Meta Tag.')
        self.assertEqual(u2.target, 'Der "Generator"-Meta-Tag.')
        self.assertEqual(u2.state, "final")
        self.assertEqual(u2.note, "Shown in the page head")

        # approved="no" and an empty <target/>
        self.assertEqual(u3.state, "initial")
        self.assertEqual(u3.target, "")

    def test_only_initial_or_final_states(self):
        doc = parse(XLIFF_12_TARGET)
        states = {u.state for u in doc.files[0].units}
        self.assertTrue(states <= {TranslationState.INITIAL, TranslationState.FINAL})

    def test_multiple_files_and_single_unit(self):
        xml = """<xliff version="1.2">
  <file source-language="en" target-language="fr" original="a.txt">
    <body><trans-unit id="1"><source>One</source></trans-unit></body>
  </file>
  <file source-language="de">
    <body>
      <trans-unit id="1"><source>Eins</source></trans-unit>
      <trans-unit id="2"><source>Zwei</source></trans-unit>
    </body>
  </file>
</xliff>"""
        doc = parse(xml)
        self.assertEqual([f.id for f in doc.files], ["a.txt", "default"])
        self.assertEqual([f.source_language for f in doc.files], ["en", "de"])
        self.assertEqual([f.target_language for f in doc.files], ["fr", None])
        self.assertEqual([len(f.units) for f in doc.files], [1, 2])
        self.assertEqual(doc.files[1].units[1].source, "Zwei")

    def test_file_without_body_has_no_units(self):
        doc = parse('<xliff version="1.2"><file source-language="en"><header/></file></xliff>')
        self.assertEqual(doc.files[0].units, [])

    def test_no_files(self):
        doc = parse('<xliff version="1.2"/>')
        self.assertEqual(doc.files, [])

    def test_missing_attributes_are_permissive(self):
        doc = parse('<xliff version="1.2"><file><body><trans-unit/></body></file></xliff>')
        f = doc.files[0]
        self.assertEqual(f.source_language, "")
        self.assertEqual(f.units[0].id, "")
        self.assertEqual(f.units[0].source, "")

    def test_source_with_attributes_keeps_text(self):
        xml = """<xliff version="1.2"><file source-language="en"><body>
<trans-unit id="x"><source xml:lang="en">Hello</source><note from="dev">Greeting</note></trans-unit>
</body></file></xliff>"""
        unit = parse(xml).files[0].units[0]
        self.assertEqual(unit.source, "Hello")
        self.assertEqual(unit.note, "Greeting")

    def test_entities_are_decoded(self):
        xml = """<xliff version="1.2"><file source-language="en"><body>
<trans-unit id="x"><source>Fish &amp; Chips &lt;3 &quot;ok&quot;</source></trans-unit>
</body></file></xliff>"""
        self.assertEqual(parse(xml).files[0].units[0].source, 'Fish & Chips <3 "ok"')


class TestParseXliff20(unittest.TestCase):
    def test_source_only(self):
        doc = parse(XLIFF_20_SOURCE)

        self.assertEqual(doc.version, XliffVersion.V2_0)
        f = doc.files[0]
        self.assertEqual(f.id, "f1")
        self.assertEqual(f.source_language, "en")
        self.assertIsNone(f.target_language)
        self.assertIsNone(f.original)
        self.assertIsNone(f.datatype)
        self.assertEqual(len(f.units), 2)

        u1 = f.units[0]
        self.assertEqual(u1.id, "headerComment")
        self.assertEqual(u1.source, "The default Header Comment.")
        self.assertIsNone(u1.target)
        self.assertIsNone(u1.state)

    def test_with_targets_and_states(self):
        doc = parse(XLIFF_20_TARGET)
        f1, f2 = doc.files

        self.assertEqual(f1.target_language, "de")
        u1, u2 = f1.units
        self.assertEqual(u1.state, TranslationState.FINAL)
        self.assertEqual(u1.target, "Der Standard-Header-Kommentar.")
        self.assertEqual(u2.state, TranslationState.REVIEWED)
        self.assertEqual(u2.target, 'Der "Generator"-Meta-Tag.')
        self.assertEqual(u2.note, "Shown in the page head")

        self.assertEqual(f2.units[0].state, "translated")
        self.assertEqual(f2.units[0].target, "Fußzeile")

    def test_language_pair_propagates_to_every_file(self):
        doc = parse(XLIFF_20_TARGET)
        self.assertEqual([(f.source_language, f.target_language) for f in doc.files], [("en", "de"), ("en", "de")])

    def test_missing_file_id_defaults(self):
        doc = parse('<xliff version="2.0" srcLang="en"><file><unit id="u"><segment><source>s</source></segment></unit></file></xliff>')
        self.assertEqual(doc.files[0].id, "default")

    def test_unit_without_segment(self):
        doc = parse('<xliff version="2.0" srcLang="en"><file id="f"><unit id="u"/></file></xliff>')
        unit = doc.files[0].units[0]
        self.assertEqual(unit.source, "")
        self.assertIsNone(unit.target)
        self.assertIsNone(unit.state)

    def test_unknown_state_is_kept(self):
        xml = '<xliff version="2.0" srcLang="en"><file id="f"><unit id="u"><segment state="needs-review"><source>s</source></segment></unit></file></xliff>'
        self.assertEqual(parse(xml).files[0].units[0].state, "needs-review")

    def test_logs_summary(self):
        with self.assertLogs("xliffkit.parser", level=logging.DEBUG) as captured:
            parse(XLIFF_20_TARGET)
        self.assertTrue(any("2 file(s), 3 unit(s)" in line for line in captured.output))


class TestParseErrors(unittest.TestCase):
    def test_malformed_markup(self):
        with self.assertRaises(XliffParseError):
            parse("not xml")

    def test_malformed_markup_is_value_error(self):
        with self.assertRaises(ValueError):
            parse("<xliff version='1.2'><file></xliff>")

    def test_empty_text(self):
        with self.assertRaises(XliffParseError):
            parse("")

    def test_wrong_root(self):
        with self.assertRaises(XliffParseError) as ctx:
            parse('<?xml version="1.0"?><root></root>')
        self.assertIn("Invalid XLIFF", str(ctx.exception))
        self.assertEqual(ctx.exception.details, {"root": "root"})

    def test_unsupported_version(self):
        with self.assertRaises(UnsupportedVersionError) as ctx:
            parse('<?xml version="1.0"?><xliff version="3.0"></xliff>')
        self.assertIn("Unsupported XLIFF version", str(ctx.exception))
        self.assertIn("3.0", str(ctx.exception))

    def test_missing_version(self):
        with self.assertRaises(UnsupportedVersionError):
            parse("<xliff><file/></xliff>")

    def test_unsupported_version_is_parse_error(self):
        with self.assertRaises(XliffParseError):
            parse('<xliff version="2.1"/>')

    def test_details_default_to_empty_dict(self):
        self.assertEqual(XliffParseError("Invalid XLIFF").details, {})
        self.assertEqual(UnsupportedVersionError("x", details={"version": "3.0"}).details, {"version": "3.0"})


if __name__ == "__main__":
    unittest.main()
