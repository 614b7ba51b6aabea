"""
Tests for config path extraction and composition.
"""

import unittest
from types import SimpleNamespace

from ConfigDeck.core.paths import (
    SourceKind,
    classify_source,
    compose_path_value,
    find_path_value,
    normalize_path,
)
from ConfigDeck.exceptions import ConfigurationError, PathLookupError, PathTypeError


class Registry:
    """Object exposing its services through get_components()."""

    def __init__(self):
        self.name = 'registry'

    def get_components(self):
        return {'mailer': {'host': 'localhost'}}


class TestPaths(unittest.TestCase):

    def test_classify_source(self):
        self.assertIs(classify_source({}), SourceKind.MAPPING)
        self.assertIs(classify_source([1]), SourceKind.MAPPING)
        self.assertIs(classify_source(SimpleNamespace()), SourceKind.OBJECT)
        for scalar in ('x', 1, 1.5, True, None):
            self.assertIs(classify_source(scalar), SourceKind.SCALAR)

    def test_normalize_path(self):
        self.assertEqual(normalize_path('a.b.c'), ['a', 'b', 'c'])
        self.assertEqual(normalize_path(('a', 0)), ['a', 0])

    def test_find_mixed_tree(self):
        source = SimpleNamespace(config={'servers': [{'host': 'a'}, {'host': 'b'}]})
        self.assertEqual(find_path_value(source, ['config', 'servers', '1', 'host']), 'b')

    def test_components_segment(self):
        self.assertEqual(find_path_value(Registry(), ['components', 'mailer', 'host']), 'localhost')

    def test_object_item_access_fallback(self):
        class Config:
            def __init__(self, **values):
                self._values = values

            def __getitem__(self, key):
                return self._values[key]

        source = SimpleNamespace(settings=Config(DEBUG=True))
        self.assertIs(classify_source(source.settings), SourceKind.OBJECT)
        self.assertIs(find_path_value(source, ['settings', 'DEBUG']), True)

    def test_lookup_errors(self):
        with self.assertRaises(PathLookupError):
            find_path_value({'a': 1}, ['b'])
        with self.assertRaises(PathLookupError):
            find_path_value([1, 2], ['5'])
        with self.assertRaises(PathLookupError) as cm:
            find_path_value(Registry(), ['missing'])
        self.assertIn('Registry::missing', str(cm.exception))
        with self.assertRaises(PathLookupError):
            find_path_value({'a': 1}, [])

    def test_scalar_descent(self):
        with self.assertRaises(PathTypeError):
            find_path_value({'a': 'text'}, ['a', 'b'])

    def test_compose(self):
        self.assertEqual(compose_path_value(['a', 'b', 'c'], 1), {'a': {'b': {'c': 1}}})
        self.assertEqual(compose_path_value(['a'], None), {'a': None})
        with self.assertRaises(ConfigurationError):
            compose_path_value([], 1)


if __name__ == "__main__":
    unittest.main()
