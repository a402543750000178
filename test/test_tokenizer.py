"""
Tokenizer tests (classification, grouping, re-serialization).

Conventions
- Test method names follow CamelCase per project convention.
"""

import unittest
from unittest import TestCase

from helmsman import tokenize, ParsedInput, OptionInput


class TestTokenize(TestCase):
    """Purely syntactic classification of raw arguments."""

    def testEmptyInput(self):
        self.assertEqual(tokenize([]), ParsedInput(None, (), ()))

    def testHierarchicalCommandName(self):
        parsed = tokenize(["remote", "add", "-n", "origin"])
        self.assertEqual(parsed.name, "remote add")
        self.assertEqual(parsed.options, (OptionInput("-n", ("origin",)),))

    def testOptionBeforeNameKeepsNameEmpty(self):
        parsed = tokenize(["-x", "a", "b"])
        self.assertIsNone(parsed.name)
        self.assertEqual(parsed.values("-x"), ("a", "b"))

    def testDirectivesAreCollectedAnywhere(self):
        parsed = tokenize(["[debug]", "concat", "[preview]", "-o", "value", "[preview]"])
        self.assertEqual(parsed.directives, ("debug", "preview", "preview"))
        self.assertEqual(parsed.name, "concat")
        self.assertEqual(parsed.values("-o"), ("value",))

    def testBracketsWithSpacesAreNotDirectives(self):
        parsed = tokenize(["cmd", "-m", "[not a directive]"])
        self.assertEqual(parsed.directives, ())
        self.assertEqual(parsed.values("-m"), ("[not a directive]",))

    def testFlagHasNoValues(self):
        parsed = tokenize(["-v", "--name", "x"])
        self.assertEqual(parsed.options, (OptionInput("-v", ()), OptionInput("--name", ("x",))))

    def testRepeatedKeysConcatenateInOrder(self):
        parsed = tokenize(["-i", "foo", "--inputs", "bar", "-i", "baz"])
        self.assertEqual(parsed.values("-i", "--inputs"), ("foo", "bar", "baz"))
        self.assertEqual(parsed.values("-i"), ("foo", "baz"))

    def testLoneDashesAreValues(self):
        parsed = tokenize(["cmd", "-x", "-", "--"])
        self.assertEqual(parsed.values("-x"), ("-", "--"))

    def testShortKeyWithMoreCharactersIsAValue(self):
        parsed = tokenize(["-s", "-abc"])
        self.assertEqual(parsed.values("-s"), ("-abc",))

    def testLongAndShortSpellingsStayDistinct(self):
        parsed = tokenize(["div", "--D", "24", "-D", "8"])
        self.assertEqual(parsed.options, (OptionInput("--D", ("24",)), OptionInput("-D", ("8",))))
        self.assertTrue(parsed.options[0].long)
        self.assertFalse(parsed.options[1].long)
        self.assertEqual(parsed.values("-D"), ("8",))
        self.assertEqual(parsed.tokens(), ["div", "--D", "24", "-D", "8"])

    def testHasAndDirectiveLookup(self):
        parsed = tokenize(["[Preview]", "-h"])
        self.assertTrue(parsed.has("-h", "--help"))
        self.assertFalse(parsed.has("--version"))
        self.assertTrue(parsed.directive("preview"))
        self.assertTrue(parsed.directive("[PREVIEW]"))

    def testTokensRoundTrip(self):
        args = ["[preview]", "remote", "add", "-n", "origin", "--url", "a b", "-v"]
        parsed = tokenize(args)
        self.assertEqual(parsed.tokens(), args)
        self.assertEqual(tokenize(parsed.tokens()), parsed)

    def testStringIsShellQuoted(self):
        self.assertEqual(str(tokenize(["concat", "-s", " "])), "concat -s ' '")

    def testRejectsNonStrings(self):
        with self.assertRaises(TypeError):
            tokenize("concat -s x")
        with self.assertRaises(TypeError):
            tokenize(["concat", 1])


if __name__ == "__main__":
    unittest.main()
