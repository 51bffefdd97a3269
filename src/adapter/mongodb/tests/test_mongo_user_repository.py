"""Tests for MongoUserRepository against a mocked pymongo collection."""

import unittest
from unittest.mock import MagicMock, patch
import sys
from pathlib import Path
from datetime import datetime, timezone
from pymongo.errors import DuplicateKeyError, OperationFailure, PyMongoError

sys.path.insert(0, str(Path(__file__).parent.parent.parent.parent))

from adapter.mongodb.connection import USERS_COLLECTION_NAME
from adapter.mongodb.indexes import ensure_index
from adapter.mongodb.user_repository import MongoUserRepository
from domain.model.errors import DuplicateError, StoreError


def _user_doc(**overrides) -> dict:
    now = datetime(2026, 1, 23, 12, 0, 0, tzinfo=timezone.utc)
    doc = {
        '_id': 'user-1',
        'first_name': 'A',
        'last_name': 'B',
        'email': 'a@x.com',
        'password_hash': '$2b$10$hash',
        'is_confirmed': False,
        'confirm_otp': '1234',
        'status': True,
        'created_at': now,
        'updated_at': now,
    }
    doc.update(overrides)
    return doc


class MongoRepoTestCase(unittest.TestCase):

    def setUp(self):
        self.collection = MagicMock()
        self.db = MagicMock()
        self.db.__getitem__.return_value = self.collection
        self.repo = MongoUserRepository(self.db)


class TestCreate(MongoRepoTestCase):

    @patch('adapter.mongodb.user_repository.uuid')
    def test_create_inserts_unconfirmed_active_user(self, mock_uuid):
        mock_uuid.uuid4.return_value.hex = 'new-user-id'

        user = self.repo.create(
            first_name='A', last_name='B', email='a@x.com',
            password_hash='$2b$10$hash', confirm_otp='4821',
        )

        self.db.__getitem__.assert_called_with(USERS_COLLECTION_NAME)
        doc = self.collection.insert_one.call_args[0][0]
        self.assertEqual(doc['_id'], 'new-user-id')
        self.assertFalse(doc['is_confirmed'])
        self.assertEqual(doc['confirm_otp'], '4821')
        self.assertTrue(doc['status'])
        self.assertEqual(user.id, 'new-user-id')
        self.assertEqual(user.password_hash, '$2b$10$hash')

    def test_duplicate_key_raises_duplicate_error(self):
        self.collection.insert_one.side_effect = DuplicateKeyError('E11000 duplicate key error')

        with self.assertRaises(DuplicateError):
            self.repo.create('A', 'B', 'a@x.com', 'h', '1234')

    def test_other_failure_raises_store_error(self):
        self.collection.insert_one.side_effect = PyMongoError('connection reset')

        with self.assertRaises(StoreError) as ctx:
            self.repo.create('A', 'B', 'a@x.com', 'h', '1234')

        self.assertEqual(ctx.exception.message, 'connection reset')


class TestReads(MongoRepoTestCase):

    def test_get_by_email_maps_document(self):
        self.collection.find_one.return_value = _user_doc()

        user = self.repo.get_by_email('a@x.com')

        self.collection.find_one.assert_called_once_with({'email': 'a@x.com'})
        self.assertEqual(user.id, 'user-1')
        self.assertEqual(user.first_name, 'A')
        self.assertFalse(user.is_confirmed)
        self.assertEqual(user.confirm_otp, '1234')

    def test_get_by_email_missing_returns_none(self):
        self.collection.find_one.return_value = None
        self.assertIsNone(self.repo.get_by_email('nobody@x.com'))

    def test_numeric_flags_are_coerced_to_bool(self):
        self.collection.find_one.return_value = _user_doc(is_confirmed=1, status=0)

        user = self.repo.get_by_id('user-1')

        self.assertIs(user.is_confirmed, True)
        self.assertIs(user.status, False)

    def test_read_failure_raises_store_error(self):
        self.collection.find_one.side_effect = PyMongoError('timeout')

        with self.assertRaises(StoreError):
            self.repo.get_by_email('a@x.com')

    def test_exists_by_email(self):
        self.collection.count_documents.return_value = 1
        self.assertTrue(self.repo.exists_by_email('a@x.com'))
        self.collection.count_documents.assert_called_once_with({'email': 'a@x.com'}, limit=1)

        self.collection.count_documents.return_value = 0
        self.assertFalse(self.repo.exists_by_email('b@x.com'))


class TestUpdates(MongoRepoTestCase):

    def test_mark_confirmed_filters_on_unconfirmed(self):
        self.collection.update_one.return_value = MagicMock(matched_count=1)

        self.assertTrue(self.repo.mark_confirmed('user-1'))

        query, update = self.collection.update_one.call_args[0]
        self.assertEqual(query, {'_id': 'user-1', 'is_confirmed': False})
        self.assertTrue(update['$set']['is_confirmed'])
        self.assertIsNone(update['$set']['confirm_otp'])
        self.assertIn('updated_at', update['$set'])

    def test_mark_confirmed_returns_false_when_nothing_matched(self):
        self.collection.update_one.return_value = MagicMock(matched_count=0)
        self.assertFalse(self.repo.mark_confirmed('user-1'))

    def test_set_confirm_otp(self):
        self.collection.update_one.return_value = MagicMock(matched_count=1)

        self.assertTrue(self.repo.set_confirm_otp('user-1', '9876'))

        update = self.collection.update_one.call_args[0][1]
        self.assertEqual(update['$set']['confirm_otp'], '9876')
        self.assertFalse(update['$set']['is_confirmed'])

    def test_update_failure_raises_store_error(self):
        self.collection.update_one.side_effect = PyMongoError('not primary')

        with self.assertRaises(StoreError):
            self.repo.set_confirm_otp('user-1', '9876')


class TestIndexes(MongoRepoTestCase):

    def test_ensure_indexes_creates_unique_email_index(self):
        self.assertTrue(self.repo.ensure_indexes())

        calls = self.collection.create_index.call_args_list
        self.assertEqual(calls[0].args[0], [('email', 1)])
        self.assertEqual(calls[0].kwargs, {'name': 'idx_users_email', 'unique': True})

    def test_ensure_indexes_reports_failure(self):
        self.collection.create_index.side_effect = PyMongoError('unauthorized')
        self.assertFalse(self.repo.ensure_indexes())

    def test_conflicting_non_unique_index_is_recreated(self):
        self.collection.create_index.side_effect = [
            OperationFailure('Index already exists with different options'),
            None,
        ]
        self.collection.index_information.return_value = {
            '_id_': {'key': [('_id', 1)]},
            'idx_users_email': {'key': [('email', 1)]},
        }

        result = ensure_index(self.collection, [('email', 1)], 'idx_users_email', unique=True)

        self.assertTrue(result)
        self.collection.drop_index.assert_called_once_with('idx_users_email')
        self.assertEqual(self.collection.create_index.call_count, 2)

    def test_same_keys_under_old_name_are_replaced(self):
        self.collection.create_index.side_effect = [OperationFailure('conflict', code=85), None]
        self.collection.index_information.return_value = {
            'email_1': {'key': [('email', 1)], 'unique': True},
        }

        self.assertTrue(ensure_index(self.collection, [('email', 1)], 'idx_users_email', unique=True))

        self.collection.drop_index.assert_called_once_with('email_1')

    def test_unresolved_conflict_returns_false(self):
        self.collection.create_index.side_effect = OperationFailure('conflict', code=86)
        self.collection.index_information.return_value = {'_id_': {'key': [('_id', 1)]}}

        self.assertFalse(ensure_index(self.collection, [('email', 1)], 'idx_users_email', unique=True))
        self.collection.drop_index.assert_not_called()

    def test_other_operation_failure_propagates(self):
        self.collection.create_index.side_effect = OperationFailure('not authorized', code=13)

        with self.assertRaises(OperationFailure):
            ensure_index(self.collection, [('email', 1)], 'idx_users_email', unique=True)


if __name__ == '__main__':
    unittest.main()
