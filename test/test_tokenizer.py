"""
Prefix and tokenizer behavioral tests.

Scope
- Prefix: validation, immutability, equality/hash by token.
- tokenize(): preamble extraction, boundary rule, longest match, value trimming,
  duplicate preservation, determinism.

Conventions
- Test method names follow CamelCase per project convention.
"""
import copy
import unittest
from unittest import TestCase

from prefixargs import ArgumentMultimap, Prefix, tokenize


class TestPrefix(TestCase):
    """Behavioral tests for the Prefix value object."""

    def testEqualityAndHashByToken(self):
        self.assertEqual(Prefix("n/"), Prefix("n/"))
        self.assertNotEqual(Prefix("n/"), Prefix("p/"))
        self.assertEqual(len({Prefix("n/"), Prefix("n/")}), 1)

    def testNotEqualToPlainString(self):
        self.assertNotEqual(Prefix("n/"), "n/")

    def testStrAndRepr(self):
        self.assertEqual(str(Prefix("t/")), "t/")
        self.assertEqual(repr(Prefix("t/")), "Prefix('t/')")

    def testPrefixOfPrefixIsSameObject(self):
        prefix = Prefix("n/")
        self.assertIs(Prefix(prefix), prefix)

    def testEmptyRejected(self):
        with self.assertRaises(ValueError):
            Prefix("")

    def testWhitespaceRejected(self):
        with self.assertRaises(ValueError):
            Prefix("n /")

    def testNonStringRejected(self):
        with self.assertRaises(TypeError):
            Prefix(3)

    def testImmutable(self):
        prefix = Prefix("n/")
        with self.assertRaises(AttributeError):
            prefix.token = "p/"
        with self.assertRaises(AttributeError):
            prefix._token = "p/"

    def testCopyKeepsEquality(self):
        prefix = Prefix("n/")
        self.assertEqual(copy.deepcopy(prefix), prefix)


class TestTokenize(TestCase):
    """Behavioral tests for tokenize() and ArgumentMultimap."""

    def setUp(self):
        self.name = Prefix("n/")
        self.phone = Prefix("p/")
        self.tag = Prefix("t/")
        self.prefixes = (self.name, self.phone, self.tag)

    def testValuesAreSegmentedAndTrimmed(self):
        multimap = tokenize("n/Alice Tan   p/999 t/vip t/exec", self.prefixes)
        self.assertEqual(multimap.preamble, "")
        self.assertEqual(multimap.get_all_values(self.name), ("Alice Tan",))
        self.assertEqual(multimap.get_all_values(self.phone), ("999",))
        self.assertEqual(multimap.get_all_values(self.tag), ("vip", "exec"))

    def testPreambleBeforeFirstPrefix(self):
        multimap = tokenize("  12 3  n/Alice", self.prefixes)
        self.assertEqual(multimap.preamble, "12 3")

    def testNoPrefixOccurrence(self):
        multimap = tokenize("   A0123456X  ", self.prefixes)
        self.assertEqual(multimap.preamble, "A0123456X")
        for prefix in self.prefixes:
            self.assertEqual(multimap.get_all_values(prefix), ())
            self.assertNotIn(prefix, multimap)

    def testNoRegisteredPrefixes(self):
        multimap = tokenize(" n/Alice ", ())
        self.assertEqual(multimap.preamble, "n/Alice")

    def testPrefixInsideValueIsNotAnOccurrence(self):
        multimap = tokenize("n/Alicep/999 p/123", self.prefixes)
        self.assertEqual(multimap.get_all_values(self.name), ("Alicep/999",))
        self.assertEqual(multimap.get_all_values(self.phone), ("123",))

    def testLongestTokenWinsAtSamePosition(self):
        short = Prefix("t/")
        long = Prefix("t/x")
        multimap = tokenize("t/xyz t/abc", (short, long))
        self.assertEqual(multimap.get_all_values(long), ("yz",))
        self.assertEqual(multimap.get_all_values(short), ("abc",))

    def testDuplicatesPreservedInOrder(self):
        multimap = tokenize("n/Alice n/Bob n/Alice", self.prefixes)
        self.assertEqual(multimap.get_all_values(self.name), ("Alice", "Bob", "Alice"))
        self.assertEqual(multimap.get_value(self.name), "Alice")
        self.assertEqual(multimap.duplicates(self.prefixes), (self.name,))

    def testEmptyValueIsKept(self):
        multimap = tokenize("1 p/ t/", self.prefixes)
        self.assertEqual(multimap.preamble, "1")
        self.assertEqual(multimap.get_all_values(self.phone), ("",))
        self.assertIn(self.phone, multimap)
        self.assertEqual(multimap.get_value(self.tag), "")

    def testAcceptsPlainStringPrefixes(self):
        multimap = tokenize("n/Alice", ["n/"])
        self.assertEqual(multimap.get_all_values("n/"), ("Alice",))

    def testDeterministic(self):
        text = "3 n/Alice p/999 t/a t/b n/Bob"
        first = tokenize(text, self.prefixes)
        for _ in range(5):
            self.assertEqual(tokenize(text, self.prefixes), first)

    def testEmptyInput(self):
        self.assertEqual(tokenize("", self.prefixes), ArgumentMultimap(""))

    def testRejectsNonStringArguments(self):
        with self.assertRaises(TypeError):
            tokenize(None, self.prefixes)

    def testRejectsStringAsPrefixCollection(self):
        with self.assertRaises(TypeError):
            tokenize("n/Alice", "n/")


if __name__ == "__main__":
    unittest.main()
