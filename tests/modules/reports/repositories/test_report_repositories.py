import unittest
from unittest.mock import MagicMock

from src.modules.reports.exceptions import ReportRepositoryError
from src.modules.reports.repositories.impl.postgres.report_repository import PostgresReportRepository
from src.modules.reports.repositories.impl.supabase.report_repository import SupabaseReportRepository

ROW = {
    "id": "4c1e1f0a-5b7e-4d4b-9d61-2b3f1c9e8a7d",
    "user_id": "user_123",
    "company_name": "Tesla Inc.",
    "ticker": "TSLA",
    "report_content": "Report body",
    "created_at": "2025-03-15T12:00:00+00:00",
}


class TestSupabaseReportRepository(unittest.TestCase):

    def setUp(self):
        self.mock_client = MagicMock()
        self.mock_table = MagicMock()
        self.mock_client.table.return_value = self.mock_table
        self.repo = SupabaseReportRepository(self.mock_client)

    def test_create(self):
        self.mock_table.insert.return_value.execute.return_value = MagicMock(data=[ROW])

        result = self.repo.create({k: v for k, v in ROW.items() if k not in ("id", "created_at")})

        self.assertEqual(result.id, ROW["id"])
        self.mock_client.table.assert_called_with("reports")

    def test_create_failure_raises(self):
        self.mock_table.insert.return_value.execute.side_effect = Exception("insert failed")

        with self.assertRaises(ReportRepositoryError):
            self.repo.create({"user_id": "user_123"})

    def test_find_recent_by_user(self):
        query = self.mock_table.select.return_value.eq.return_value.order.return_value.limit.return_value
        query.execute.return_value = MagicMock(data=[ROW])

        results = self.repo.find_recent_by_user("user_123", limit=3)

        self.assertEqual(len(results), 1)
        self.mock_table.select.return_value.eq.return_value.order.assert_called_once_with("created_at", desc=True)
        self.mock_table.select.return_value.eq.return_value.order.return_value.limit.assert_called_once_with(3)


class TestPostgresReportRepository(unittest.TestCase):

    def setUp(self):
        self.mock_db = MagicMock()
        self.mock_conn = MagicMock()
        self.mock_cursor = MagicMock()
        self.mock_db.connection.return_value.__enter__.return_value = self.mock_conn
        self.mock_conn.cursor.return_value = self.mock_cursor
        self.repo = PostgresReportRepository(self.mock_db)

    def test_find_recent_by_user(self):
        self.mock_cursor.fetchall.return_value = [ROW]

        results = self.repo.find_recent_by_user("user_123", limit=3)

        self.assertEqual(results[0].ticker, "TSLA")
        self.assertEqual(self.mock_cursor.execute.call_args.args[1], ("user_123", 3))
        self.assertIn("ORDER BY created_at DESC", repr(self.mock_cursor.execute.call_args.args[0]))

    def test_create_failure_raises(self):
        self.mock_cursor.execute.side_effect = Exception("insert failed")

        with self.assertRaises(ReportRepositoryError):
            self.repo.create({"user_id": "user_123"})

        self.mock_conn.rollback.assert_called_once()


if __name__ == "__main__":
    unittest.main()
