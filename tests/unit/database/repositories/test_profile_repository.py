#!/usr/bin/env python3
"""
Unit tests for the model profile repository.

Tests the ProfileRepository methods:
- search() paging, ordering and snapshot conversion
- find_by_id() lookups
and the filter-to-SQL translation in build_search_statement().
"""

import unittest
import uuid
from unittest.mock import MagicMock

from sqlalchemy.dialects import postgresql

from core.errors import NotFoundError
from core.matching.models import Candidate, Criteria
from database.models import ModelProfile
from database.repositories.profile import ProfileRepository, build_search_statement, to_candidate


def compile_sql(stmt) -> str:
    return str(stmt.compile(dialect=postgresql.dialect()))


def make_profile(**overrides) -> ModelProfile:
    values = dict(
        id=uuid.uuid4(),
        user_id=uuid.uuid4(),
        name="Aida",
        age=24,
        height=176.0,
        weight=54.0,
        gender="female",
        experience=4,
        city="Almaty",
        categories=["fashion", "beauty"],
        languages=["kazakh"],
        rating=4.7,
        is_public=True,
    )
    values.update(overrides)
    return ModelProfile(**values)


class TestBuildSearchStatement(unittest.TestCase):

    def test_public_only_without_filters(self):
        sql = compile_sql(build_search_statement({}))

        self.assertIn("model_profiles.is_public IS true", sql)
        self.assertNotIn("model_profiles.city =", sql)

    def test_include_private(self):
        sql = compile_sql(build_search_statement({}, public_only=False))

        self.assertNotIn("WHERE", sql)

    def test_all_filters(self):
        filters = {
            'city': "Almaty", 'gender': "female",
            'age_min': 18, 'age_max': 30,
            'height_min': 170.0, 'height_max': 185.0,
            'weight_min': 45.0, 'weight_max': 60.0,
            'min_rating': 4.0,
            'categories': ["fashion"], 'languages': ["english"],
        }

        sql = compile_sql(build_search_statement(filters))

        for fragment in (
            "model_profiles.city =",
            "model_profiles.gender =",
            "model_profiles.age >=",
            "model_profiles.age <=",
            "model_profiles.height >=",
            "model_profiles.height <=",
            "model_profiles.weight >=",
            "model_profiles.weight <=",
            "model_profiles.rating >=",
            "model_profiles.categories &&",
            "model_profiles.languages &&",
        ):
            self.assertIn(fragment, sql)


class TestToCandidate(unittest.TestCase):

    def test_snapshot(self):
        profile = make_profile()

        candidate = to_candidate(profile)

        self.assertIsInstance(candidate, Candidate)
        self.assertEqual(candidate.id, str(profile.id))
        self.assertEqual(candidate.categories, frozenset({"fashion", "beauty"}))
        self.assertEqual(candidate.rating, 4.7)

    def test_null_arrays(self):
        candidate = to_candidate(make_profile(categories=None, languages=None, name=None))

        self.assertEqual(candidate.categories, frozenset())
        self.assertEqual(candidate.name, "")


class TestProfileRepositorySearch(unittest.TestCase):

    def setUp(self):
        self.mock_db = MagicMock()
        self.repo = ProfileRepository(self.mock_db)
        self.profiles = [make_profile(name="A"), make_profile(name="B")]

        count_result = MagicMock()
        count_result.scalar_one.return_value = 7
        rows_result = MagicMock()
        rows_result.scalars.return_value.all.return_value = self.profiles
        self.mock_db.execute.side_effect = [count_result, rows_result]

    def test_returns_page(self):
        page = self.repo.search(Criteria(city="Almaty"), page=2, page_size=2)

        self.assertEqual(page.total, 7)
        self.assertEqual([c.name for c in page.candidates], ["A", "B"])

        rows_sql = compile_sql(self.mock_db.execute.call_args_list[1].args[0])
        self.assertIn("ORDER BY model_profiles.rating DESC, model_profiles.id", rows_sql)
        self.assertIn("LIMIT", rows_sql)
        self.assertIn("OFFSET", rows_sql)

    def test_unbounded_page(self):
        self.repo.search(Criteria(), page=1, page_size=0)

        rows_sql = compile_sql(self.mock_db.execute.call_args_list[1].args[0])
        self.assertNotIn("LIMIT", rows_sql)


class TestProfileRepositoryFindById(unittest.TestCase):

    def setUp(self):
        self.mock_db = MagicMock()
        self.repo = ProfileRepository(self.mock_db)

    def test_found(self):
        profile = make_profile()
        self.mock_db.execute.return_value.scalar_one_or_none.return_value = profile

        self.assertEqual(self.repo.find_by_id(str(profile.id)).name, "Aida")

    def test_missing(self):
        self.mock_db.execute.return_value.scalar_one_or_none.return_value = None

        with self.assertRaises(NotFoundError):
            self.repo.find_by_id(str(uuid.uuid4()))

    def test_malformed_id_is_not_found(self):
        with self.assertRaises(NotFoundError):
            self.repo.find_by_id("not-a-uuid")

        self.mock_db.execute.assert_not_called()


if __name__ == '__main__':
    unittest.main()
